try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from app.main import app
from app.services import ProxyResult

pytestmark = pytest.mark.anyio("asyncio")


class StaticProxy:
    def __init__(self, result: ProxyResult) -> None:
        self.result = result
        self.queries = []

    async def handle(self, query):
        self.queries.append(query)
        return self.result


@pytest.fixture()
def proxy():
    from app import dependencies

    stub = StaticProxy(
        ProxyResult(
            status_code=200,
            body={
                "correlationId": "c1",
                "items": [
                    {"id": "p1", "sku": "SKU-1", "title": "ProBook 450", "vendorName": "HP",
                     "price": 899.5, "currency": "USD", "stock": 3},
                    {"id": "p2", "sku": "SKU-2", "title": "<Dock>"},
                ],
                "page": 1,
                "pageSize": 2,
            },
            correlation_id="header-corr",
        )
    )
    app.dependency_overrides.clear()
    app.dependency_overrides[dependencies.get_catalog_proxy_service] = lambda: stub
    yield stub
    app.dependency_overrides.clear()


async def _get(path: str, **kwargs) -> httpx.Response:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        return await client.get(path, **kwargs)


async def test_results_fragment_renders_tiles(proxy) -> None:
    response = await _get("/ui/results", params={"q": "hp, probook", "pageSize": 12})

    assert response.status_code == 200
    html = response.text
    assert html.count('<article class="tile">') == 2
    assert "Corr: c1" in html
    assert "SKU: SKU-1 • HP" in html
    assert "USD 899.5" in html
    assert "Stock: 3" in html
    assert "No image" in html
    assert "&lt;Dock&gt;" in html
    query = proxy.queries[0]
    assert query.keywords == ("hp", "probook")
    assert query.page_size == "12"


async def test_full_page_includes_debounced_search_box(proxy) -> None:
    response = await _get("/")

    assert response.status_code == 200
    assert 'input changed delay:350ms' in response.text
    assert 'hx-trigger="change delay:350ms"' in response.text
    assert 'id="results"' in response.text


async def test_error_fragment_shows_correlation(proxy) -> None:
    proxy.result = ProxyResult(
        status_code=503,
        body={"error": "Vendor API error", "details": "upstream down"},
        correlation_id="corr-77",
    )

    response = await _get("/ui/results", params={"q": "hp"})

    assert "Vendor API error (corr: corr-77)" in response.text
    assert '<article class="tile">' not in response.text
    assert "No products found." not in response.text


async def test_empty_results_message(proxy) -> None:
    proxy.result = ProxyResult(
        status_code=200,
        body={"correlationId": "c2", "items": [], "page": 1, "pageSize": 24},
        correlation_id="c2",
    )

    response = await _get("/ui/results")

    assert "No products found." in response.text


async def test_unknown_page_size_falls_back_to_default(proxy) -> None:
    await _get("/ui/results", params={"pageSize": 25})

    assert proxy.queries[0].page_size == "24"
