"""Errors raised by the upstream catalog and OAuth clients."""

from __future__ import annotations


class CatalogProxyError(Exception):
    """Base class for failures talking to the reseller or its OAuth provider."""


class AuthError(CatalogProxyError):
    """Raised when the token endpoint refuses or garbles a client-credentials grant."""

    def __init__(self, status_code: int | None, body: str) -> None:
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Token request failed: {body}"
        else:
            message = f"Token request failed: {status_code} {body}"
        super().__init__(message)


class VendorAPIError(CatalogProxyError):
    """Raised when the catalog endpoint answers with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Vendor API error: {status_code}")


class UpstreamNetworkError(CatalogProxyError):
    """Raised when the vendor or the OAuth provider cannot be reached at all."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Could not reach {target}: {reason}")


__all__ = [
    "AuthError",
    "CatalogProxyError",
    "UpstreamNetworkError",
    "VendorAPIError",
]
