"""HTTP client for the reseller catalog search endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from app.clients.errors import UpstreamNetworkError, VendorAPIError
from app.core.config import VendorSettings
from app.schemas import CatalogQuery

logger = logging.getLogger(__name__)


class ResellerCatalogClient:
    """Forward catalog searches to the reseller API with its required headers."""

    def __init__(
        self,
        vendor_settings: VendorSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._vendor = vendor_settings
        self._transport = transport

    def build_headers(self, *, access_token: str, correlation_id: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "x-api-key": self._vendor.api_key,
            "IM-CustomerNumber": self._vendor.customer_number,
            "IM-CorrelationID": correlation_id,
            "IM-CountryCode": self._vendor.country_code,
            "Accept": "application/json",
        }

    def build_request(
        self, query: CatalogQuery, *, access_token: str, correlation_id: str
    ) -> httpx.Request:
        """Assemble the upstream GET without sending it."""
        return httpx.Request(
            "GET",
            self._vendor.catalog_url,
            params=query.upstream_params(),
            headers=self.build_headers(
                access_token=access_token, correlation_id=correlation_id
            ),
        )

    async def search(
        self, query: CatalogQuery, *, access_token: str, correlation_id: str
    ) -> Any:
        """Run a catalog search and return the decoded JSON body."""
        request = self.build_request(
            query, access_token=access_token, correlation_id=correlation_id
        )
        logger.info("Catalog request %s -> %s", correlation_id, request.url)

        try:
            async with httpx.AsyncClient(
                timeout=self._vendor.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.send(request)
        except httpx.RequestError as exc:
            logger.warning("Catalog request %s failed: %s", correlation_id, exc)
            raise UpstreamNetworkError("reseller catalog API", str(exc)) from exc

        if not response.is_success:
            logger.warning(
                "Catalog request %s returned status %s",
                correlation_id,
                response.status_code,
            )
            raise VendorAPIError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Catalog request %s returned a non-JSON body", correlation_id)
            raise VendorAPIError(
                httpx.codes.BAD_GATEWAY, response.text
            ) from exc


__all__ = ["ResellerCatalogClient"]
