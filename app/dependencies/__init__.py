"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_catalog_client,
    get_catalog_proxy_service,
    get_response_cache,
    get_token_cache,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_catalog_client",
    "get_catalog_proxy_service",
    "get_response_cache",
    "get_token_cache",
]
