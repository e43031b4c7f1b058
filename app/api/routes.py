"""
FastAPI routes for the catalog proxy.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.dependencies import get_app_settings, get_catalog_proxy_service
from app.schemas import CatalogQuery
from app.utils.correlation import CORRELATION_HEADER

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(
    settings: Annotated[Any, Depends(get_app_settings)],
) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.get("/catalog")
async def search_catalog(
    proxy: Annotated[Any, Depends(get_catalog_proxy_service)],
    page_number: str = Query("1", alias="pageNumber"),
    page_size: str = Query("25", alias="pageSize"),
    type: str = Query("IM::any", description="Vendor resource-type filter."),
    keyword: List[str] = Query(
        default=[],
        description="Repeatable search keyword, forwarded in order.",
    ),
) -> JSONResponse:
    """Relay a paginated keyword search to the reseller catalog."""
    query = CatalogQuery(
        page_number=page_number,
        page_size=page_size,
        type=type,
        keywords=tuple(keyword),
    )
    result = await proxy.handle(query)

    headers = {CORRELATION_HEADER: result.correlation_id}
    if result.ok:
        headers["X-Cache"] = "HIT" if result.cached else "MISS"
    else:
        logger.info(
            "Catalog request %s relayed error status %s",
            result.correlation_id,
            result.status_code,
        )
    return JSONResponse(
        content=result.body, status_code=int(result.status_code), headers=headers
    )


__all__ = ["router"]
