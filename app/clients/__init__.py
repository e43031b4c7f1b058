"""Expose constructed client wrappers."""

from .errors import AuthError, CatalogProxyError, UpstreamNetworkError, VendorAPIError
from .reseller_catalog import ResellerCatalogClient
from .vendor_auth import ClientCredentialsTokenCache

__all__ = [
    "AuthError",
    "CatalogProxyError",
    "ClientCredentialsTokenCache",
    "ResellerCatalogClient",
    "UpstreamNetworkError",
    "VendorAPIError",
]
