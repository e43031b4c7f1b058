"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from app.clients import ClientCredentialsTokenCache, ResellerCatalogClient
from app.core.config import get_settings
from app.services import CatalogProxyService, CatalogResponseCache, get_transform


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_cache() -> ClientCredentialsTokenCache:
    """Provide the process-wide client-credentials token cache."""
    settings = _settings()
    return ClientCredentialsTokenCache(
        settings.oauth,
        timeout=settings.vendor.timeout_seconds,
    )


@lru_cache()
def get_catalog_client() -> ResellerCatalogClient:
    """Provide the reseller catalog client."""
    return ResellerCatalogClient(_settings().vendor)


@lru_cache()
def get_response_cache() -> CatalogResponseCache:
    """Provide the shared catalog response cache."""
    return CatalogResponseCache(ttl_seconds=_settings().catalog.cache_ttl_seconds)


@lru_cache()
def get_catalog_proxy_service() -> CatalogProxyService:
    """Build the catalog proxy from the shared clients."""
    settings = _settings()
    return CatalogProxyService(
        token_cache=get_token_cache(),
        catalog_client=get_catalog_client(),
        response_cache=get_response_cache(),
        transform=get_transform(settings.catalog.response_mode),
    )


__all__ = [
    "get_catalog_client",
    "get_catalog_proxy_service",
    "get_response_cache",
    "get_token_cache",
]
