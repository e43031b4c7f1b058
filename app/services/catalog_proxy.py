"""
Proxy service that relays catalog searches to the reseller API.

The service never raises past ``handle``: every failure is turned into a
``ProxyResult`` carrying an HTTP status and an ``{error, details}`` body.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from app.clients.errors import AuthError, UpstreamNetworkError, VendorAPIError
from app.clients.reseller_catalog import ResellerCatalogClient
from app.clients.vendor_auth import ClientCredentialsTokenCache
from app.schemas import CatalogErrorResponse, CatalogQuery
from app.services.catalog_transforms import CatalogTransform, passthrough
from app.services.response_cache import CatalogResponseCache
from app.utils.correlation import generate_correlation_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyResult:
    """Outcome of a proxied catalog search."""

    status_code: int
    body: Any
    correlation_id: str
    cached: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def _error(status_code: int, error: str, details: str, correlation_id: str) -> ProxyResult:
    body = CatalogErrorResponse(error=error, details=details).model_dump()
    return ProxyResult(status_code=status_code, body=body, correlation_id=correlation_id)


class CatalogProxyService:
    """Obtain a token, forward the search upstream and relay the outcome."""

    def __init__(
        self,
        *,
        token_cache: ClientCredentialsTokenCache,
        catalog_client: ResellerCatalogClient,
        response_cache: CatalogResponseCache | None = None,
        transform: CatalogTransform = passthrough,
    ) -> None:
        self._tokens = token_cache
        self._catalog = catalog_client
        self._cache = response_cache
        self._transform = transform

    async def handle(self, query: CatalogQuery) -> ProxyResult:
        correlation_id = generate_correlation_id()
        cache_key = query.cache_key()

        if self._cache is not None:
            cached_body = self._cache.get(cache_key)
            if cached_body is not None:
                logger.info("Catalog request %s served from cache", correlation_id)
                if (
                    self._transform is not passthrough
                    and isinstance(cached_body, dict)
                    and "correlationId" in cached_body
                ):
                    # Transformed bodies carry the id of the request that filled the cache.
                    cached_body = {**cached_body, "correlationId": correlation_id}
                return ProxyResult(
                    status_code=HTTPStatus.OK,
                    body=cached_body,
                    correlation_id=correlation_id,
                    cached=True,
                )

        try:
            access_token = await self._tokens.get_access_token()
        except AuthError as exc:
            logger.warning(
                "Catalog request %s could not obtain a token: %s",
                correlation_id,
                exc.status_code,
            )
            return _error(
                HTTPStatus.BAD_GATEWAY, "Authentication failed", exc.body, correlation_id
            )
        except UpstreamNetworkError as exc:
            return _error(
                HTTPStatus.BAD_GATEWAY, "Vendor API unreachable", str(exc), correlation_id
            )

        try:
            raw = await self._catalog.search(
                query, access_token=access_token, correlation_id=correlation_id
            )
        except VendorAPIError as exc:
            if exc.status_code == HTTPStatus.UNAUTHORIZED:
                # The vendor no longer accepts the token; the next request refreshes it.
                self._tokens.invalidate()
            return _error(exc.status_code, "Vendor API error", exc.body, correlation_id)
        except UpstreamNetworkError as exc:
            return _error(
                HTTPStatus.BAD_GATEWAY, "Vendor API unreachable", str(exc), correlation_id
            )

        try:
            body = self._transform(raw, correlation_id=correlation_id, query=query)
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            # pydantic's ValidationError is a ValueError.
            logger.warning(
                "Catalog request %s returned a body the transform rejected: %s",
                correlation_id,
                exc,
            )
            return _error(
                HTTPStatus.BAD_GATEWAY, "Invalid vendor response", str(exc), correlation_id
            )

        if self._cache is not None:
            self._cache.set(cache_key, body)
        return ProxyResult(
            status_code=HTTPStatus.OK, body=body, correlation_id=correlation_id
        )


__all__ = ["CatalogProxyService", "ProxyResult"]
