from __future__ import annotations

import re

import pytest

from app.clients.errors import AuthError, UpstreamNetworkError, VendorAPIError
from app.schemas import CatalogQuery
from app.services import CatalogProxyService, CatalogResponseCache
import httpx

from app.clients.vendor_auth import ClientCredentialsTokenCache
from app.services.catalog_transforms import normalize_reseller_catalog


class StubTokenCache:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls = 0
        self.invalidated = 0

    async def get_access_token(self) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return "access-token"

    def invalidate(self) -> None:
        self.invalidated += 1


class StubCatalogClient:
    def __init__(self, *, body=None, error: Exception | None = None) -> None:
        self.body = body if body is not None else {"items": []}
        self.error = error
        self.calls: list[dict] = []

    async def search(self, query, *, access_token, correlation_id):
        self.calls.append(
            {
                "query": query,
                "access_token": access_token,
                "correlation_id": correlation_id,
            }
        )
        if self.error:
            raise self.error
        return self.body


def _service(tokens, catalog, cache=None, **kwargs) -> CatalogProxyService:
    return CatalogProxyService(
        token_cache=tokens, catalog_client=catalog, response_cache=cache, **kwargs
    )


@pytest.mark.asyncio
async def test_success_relays_body_verbatim() -> None:
    body = {"correlationId": "c1", "items": [], "page": 1, "pageSize": 2, "extra": True}
    catalog = StubCatalogClient(body=body)
    service = _service(StubTokenCache(), catalog)

    result = await service.handle(CatalogQuery())

    assert result.status_code == 200
    assert result.body == body
    assert re.fullmatch(r"[0-9a-f]{32}", result.correlation_id)
    assert catalog.calls[0]["access_token"] == "access-token"
    assert catalog.calls[0]["correlation_id"] == result.correlation_id


@pytest.mark.asyncio
async def test_correlation_id_is_fresh_per_request() -> None:
    service = _service(StubTokenCache(), StubCatalogClient())

    first = await service.handle(CatalogQuery())
    second = await service.handle(CatalogQuery())

    assert first.correlation_id != second.correlation_id


@pytest.mark.asyncio
async def test_vendor_error_relays_status_and_text() -> None:
    service = _service(
        StubTokenCache(),
        StubCatalogClient(error=VendorAPIError(503, "upstream down")),
    )

    result = await service.handle(CatalogQuery())

    assert result.status_code == 503
    assert result.body == {"error": "Vendor API error", "details": "upstream down"}


@pytest.mark.asyncio
async def test_vendor_unauthorized_invalidates_token() -> None:
    tokens = StubTokenCache()
    service = _service(tokens, StubCatalogClient(error=VendorAPIError(401, "expired")))

    result = await service.handle(CatalogQuery())

    assert result.status_code == 401
    assert tokens.invalidated == 1


@pytest.mark.asyncio
async def test_auth_failure_becomes_bad_gateway() -> None:
    catalog = StubCatalogClient()
    service = _service(StubTokenCache(error=AuthError(400, "bad client")), catalog)

    result = await service.handle(CatalogQuery())

    assert result.status_code == 502
    assert result.body == {"error": "Authentication failed", "details": "bad client"}
    assert catalog.calls == []


@pytest.mark.asyncio
async def test_network_failure_becomes_bad_gateway() -> None:
    service = _service(
        StubTokenCache(),
        StubCatalogClient(error=UpstreamNetworkError("reseller catalog API", "refused")),
    )

    result = await service.handle(CatalogQuery())

    assert result.status_code == 502
    assert result.body["error"] == "Vendor API unreachable"


@pytest.mark.asyncio
async def test_identical_queries_are_served_from_cache() -> None:
    tokens = StubTokenCache()
    catalog = StubCatalogClient(body={"items": [], "page": 1})
    service = _service(tokens, catalog, CatalogResponseCache(ttl_seconds=60))

    first = await service.handle(CatalogQuery(keyword=["hp"]))
    second = await service.handle(CatalogQuery(keyword=["hp"]))
    third = await service.handle(CatalogQuery(keyword=["dell"]))

    assert not first.cached
    assert second.cached
    assert second.body == first.body
    assert not third.cached
    assert len(catalog.calls) == 2
    assert tokens.calls == 2


@pytest.mark.asyncio
async def test_errors_are_not_cached() -> None:
    catalog = StubCatalogClient(error=VendorAPIError(500, "boom"))
    service = _service(StubTokenCache(), catalog, CatalogResponseCache(ttl_seconds=60))

    await service.handle(CatalogQuery())
    await service.handle(CatalogQuery())

    assert len(catalog.calls) == 2


@pytest.mark.asyncio
async def test_transform_receives_correlation_id() -> None:
    raw = {"recordsFound": 1, "pageNumber": 1, "pageSize": 25, "catalog": [
        {"ingramPartNumber": "ABC123", "description": "Laptop"}
    ]}
    service = _service(
        StubTokenCache(),
        StubCatalogClient(body=raw),
        transform=normalize_reseller_catalog,
    )

    result = await service.handle(CatalogQuery())

    assert result.body["correlationId"] == result.correlation_id
    assert result.body["items"][0]["sku"] == "ABC123"


@pytest.mark.asyncio
async def test_malformed_items_become_bad_gateway() -> None:
    catalog = StubCatalogClient(body={"items": [{"id": 1}], "page": "first"})
    cache = CatalogResponseCache(ttl_seconds=60)
    service = _service(
        StubTokenCache(), catalog, cache, transform=normalize_reseller_catalog
    )

    result = await service.handle(CatalogQuery())

    assert result.status_code == 502
    assert result.body["error"] == "Invalid vendor response"
    assert set(result.body) == {"error", "details"}
    assert len(cache) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        [{"access_token": "abc", "expires_in": 3600}],
        {"access_token": "abc", "expires_in": "soon"},
    ],
)
async def test_garbled_token_payload_becomes_bad_gateway(oauth_settings, payload) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    tokens = ClientCredentialsTokenCache(
        oauth_settings, transport=httpx.MockTransport(handler)
    )
    catalog = StubCatalogClient()
    service = _service(tokens, catalog)

    result = await service.handle(CatalogQuery())

    assert result.status_code == 502
    assert result.body["error"] == "Authentication failed"
    assert catalog.calls == []


@pytest.mark.asyncio
async def test_cached_normalized_body_carries_current_correlation_id() -> None:
    raw = {"recordsFound": 1, "pageNumber": 1, "pageSize": 25, "catalog": [
        {"ingramPartNumber": "ABC123", "description": "Laptop"}
    ]}
    service = _service(
        StubTokenCache(),
        StubCatalogClient(body=raw),
        CatalogResponseCache(ttl_seconds=60),
        transform=normalize_reseller_catalog,
    )

    first = await service.handle(CatalogQuery())
    second = await service.handle(CatalogQuery())

    assert second.cached
    assert second.body["correlationId"] == second.correlation_id
    assert first.body["correlationId"] == first.correlation_id
    assert second.body["items"] == first.body["items"]
