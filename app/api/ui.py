"""
HTML views for the catalog browser.

Both views drive a ``CatalogBrowser`` against the in-process proxy, so the
rendered page follows the same keyword, paging and error rules as any other
client of the browser state.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from app.dependencies import get_catalog_proxy_service
from app.ui.browser import (
    DEFAULT_PAGE_SIZE,
    PAGE_SIZE_OPTIONS,
    CatalogBrowser,
    ProxyCatalogFetcher,
)
from app.ui.rendering import render_page, render_results

router = APIRouter()


async def _load_browser(proxy: Any, q: str, page: int, page_size: int) -> CatalogBrowser:
    if page_size not in PAGE_SIZE_OPTIONS:
        page_size = DEFAULT_PAGE_SIZE
    browser = CatalogBrowser(ProxyCatalogFetcher(proxy), page_size=page_size)
    await browser.load(search_text=q, page=page, page_size=page_size)
    return browser


@router.get("/", response_class=HTMLResponse)
async def catalog_page(
    proxy: Annotated[Any, Depends(get_catalog_proxy_service)],
    q: str = Query("", description="Raw search text."),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
) -> HTMLResponse:
    """Render the full catalog browser page."""
    browser = await _load_browser(proxy, q, page, page_size)
    return HTMLResponse(render_page(browser.view()))


@router.get("/ui/results", response_class=HTMLResponse)
async def catalog_results(
    proxy: Annotated[Any, Depends(get_catalog_proxy_service)],
    q: str = Query("", description="Raw search text."),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
) -> HTMLResponse:
    """Render only the results fragment swapped in by the search form."""
    browser = await _load_browser(proxy, q, page, page_size)
    return HTMLResponse(render_results(browser.view()))


__all__ = ["router"]
