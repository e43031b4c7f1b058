from __future__ import annotations

import httpx
import pytest

from scripts import catalog_cli


@pytest.mark.anyio
async def test_run_once_prints_results(capsys: pytest.CaptureFixture[str]) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "correlationId": "c1",
                "items": [{"id": "1", "sku": "4HK71", "title": "ProBook"}],
                "page": 2,
                "pageSize": 12,
            },
        )

    exit_code = await catalog_cli.run_once(
        "hp probook",
        proxy_url="http://proxy.local",
        page=2,
        page_size=12,
        transport=httpx.MockTransport(handler),
    )

    assert exit_code == 0
    params = requests[0].url.params
    assert params.get_list("keyword") == ["hp", "probook"]
    assert params["pageNumber"] == "2"
    assert params["pageSize"] == "12"
    output = capsys.readouterr().out
    assert "Corr: c1" in output
    assert "SKU: 4HK71" in output
    assert "[prev]" in output


@pytest.mark.anyio
async def test_run_once_reports_unreachable_proxy(capsys: pytest.CaptureFixture[str]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    exit_code = await catalog_cli.run_once(
        "hp", proxy_url="http://proxy.local", transport=httpx.MockTransport(handler)
    )

    assert exit_code == 1
    assert "Network error" in capsys.readouterr().out
