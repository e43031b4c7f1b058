"""Jinja2 rendering for the catalog browser views."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.ui.browser import DEBOUNCE_SECONDS, BrowserView

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
PAGE_TITLE = "Catalog Browser"


@lru_cache()
def get_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_results(view: BrowserView) -> str:
    """Render the status bar, pager and product grid."""
    return get_environment().get_template("_results.html").render(view=view)


def render_page(view: BrowserView) -> str:
    """Render the full browser page around the initial results."""
    return get_environment().get_template("catalog_page.html").render(
        view=view,
        title=PAGE_TITLE,
        debounce_ms=int(DEBOUNCE_SECONDS * 1000),
    )


__all__ = ["render_page", "render_results"]
