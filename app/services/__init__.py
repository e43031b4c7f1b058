"""Service layer exports."""

from .catalog_proxy import CatalogProxyService, ProxyResult
from .catalog_transforms import get_transform, normalize_reseller_catalog, passthrough
from .response_cache import CatalogResponseCache

__all__ = [
    "CatalogProxyService",
    "CatalogResponseCache",
    "ProxyResult",
    "get_transform",
    "normalize_reseller_catalog",
    "passthrough",
]
