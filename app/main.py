"""
FastAPI application entrypoint for the reseller catalog proxy.
"""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.api.ui import router as ui_router
from app.core.config import get_settings
from app.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Reseller Catalog Proxy",
        version="0.1.0",
        description="Catalog search proxy and browser for the reseller API.",
    )
    app.include_router(api_router, prefix="/api")
    app.include_router(ui_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
