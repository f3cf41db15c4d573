"""
tests/test_status_router.py

Integration tests for gateway/routers/status.py and gateway/services/source.py.
The device API is never contacted: source functions are patched, or httpx is
given a MockTransport.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from config import settings
from gateway.main import app
from gateway.services import source
from tests.fixtures import build_activity_record, build_status_record

_API_BASE = "http://device.local"


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


def _http_status_error(status_code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", f"{_API_BASE}{source.STATUS_PATH}")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError("upstream error", request=request, response=response)


def _mock_transport_client(handler):
    """Factory that builds real AsyncClients routed through ``handler``."""
    real_client = httpx.AsyncClient

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    return factory


# ── GET /copy ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_copy_returns_narrative_for_device_records() -> None:
    """Both sources answer: the copy carries classification and availability."""
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.fetch_latest_status",
        new_callable=AsyncMock,
        return_value=build_status_record(hr=72),
    ), patch(
        "gateway.services.source.fetch_latest_activity",
        new_callable=AsyncMock,
        return_value=build_activity_record(),
    ):
        async with _client() as client:
            response = await client.get("/copy")

    assert response.status_code == 200
    body = response.json()
    assert body["activity"]["text"] == "用 Cursor"
    assert body["availability"]["status"]
    assert body["data"]["process_name"] == "cursor.exe"
    assert "last_update" in body


@pytest.mark.asyncio
async def test_copy_without_api_base_is_configuration_error() -> None:
    with patch.object(settings, "api_base", ""):
        async with _client() as client:
            response = await client.get("/copy")

    assert response.status_code == 500
    assert response.json() == {"error": "Server configuration error"}


@pytest.mark.asyncio
async def test_copy_degrades_to_offline_copy_on_upstream_error() -> None:
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.fetch_latest_status",
        new_callable=AsyncMock,
        side_effect=_http_status_error(502),
    ), patch(
        "gateway.services.source.fetch_latest_activity",
        new_callable=AsyncMock,
        return_value=None,
    ):
        async with _client() as client:
            response = await client.get("/copy")

    assert response.status_code == 200
    body = response.json()
    assert body["alive"]["text"] == "掉线了"
    assert body["availability"]["reason"] == "暂时无法连接到数据源"


@pytest.mark.asyncio
async def test_copy_times_out_with_504() -> None:
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.fetch_latest_status",
        new_callable=AsyncMock,
        side_effect=httpx.ReadTimeout("timeout"),
    ), patch(
        "gateway.services.source.fetch_latest_activity",
        new_callable=AsyncMock,
        return_value=None,
    ):
        async with _client() as client:
            response = await client.get("/copy")

    assert response.status_code == 504
    assert response.json() == {"error": "Data source timeout"}


@pytest.mark.asyncio
async def test_copy_with_malformed_body_is_internal_error() -> None:
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.fetch_latest_status",
        new_callable=AsyncMock,
        side_effect=ValueError("expected a JSON array"),
    ), patch(
        "gateway.services.source.fetch_latest_activity",
        new_callable=AsyncMock,
        return_value=None,
    ):
        async with _client() as client:
            response = await client.get("/copy")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}


# ── Proxies ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_activity_proxy_returns_empty_list_on_failure() -> None:
    with patch(
        "gateway.services.source.fetch_records",
        new_callable=AsyncMock,
        side_effect=_http_status_error(500),
    ):
        async with _client() as client:
            response = await client.get("/activity")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_status_proxy_passes_records_through() -> None:
    records = [{"user_id": "demo", "last_non_zero_hr": 70}]
    with patch(
        "gateway.services.source.fetch_records",
        new_callable=AsyncMock,
        return_value=records,
    ) as mock_fetch:
        async with _client() as client:
            response = await client.get("/status")

    assert response.json() == records
    mock_fetch.assert_awaited_once_with(source.STATUS_PATH)


# ── POST /evaluate ──────────────────────────────────────────


@pytest.mark.asyncio
async def test_evaluate_classifies_and_predicts() -> None:
    payload = {
        "telemetry": {
            "window_title": "main.ts - myproject",
            "process_name": "C:\\Program Files\\Cursor\\Cursor.exe",
            "mouse_idle_seconds": 0,
        },
        "now": "2024-06-12T10:00:00",
    }
    async with _client() as client:
        response = await client.post("/evaluate", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["activity"]["type"] == "working"
    assert body["activity"]["sub_type"] == "coding_active"
    assert body["availability"]["status"] == "写代码"


@pytest.mark.asyncio
async def test_evaluate_without_telemetry_is_unclear() -> None:
    async with _client() as client:
        response = await client.post("/evaluate", json={})

    body = response.json()
    assert body["activity"] is None
    assert body["availability"]["status"] == "有点懵"


@pytest.mark.asyncio
async def test_evaluate_rejects_negative_idle_time() -> None:
    payload = {"telemetry": {"window_title": "", "process_name": "", "mouse_idle_seconds": -1}}
    async with _client() as client:
        response = await client.post("/evaluate", json=payload)

    assert response.status_code == 422


# ── Source client ───────────────────────────────────────────


@pytest.mark.asyncio
async def test_fetch_latest_status_parses_first_record() -> None:
    record = build_status_record(hr=88).model_dump()

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == source.STATUS_PATH
        assert request.headers["User-Agent"] == settings.source_user_agent
        return httpx.Response(200, json=[record, {"last_non_zero_hr": 1}])

    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.httpx.AsyncClient",
        side_effect=_mock_transport_client(handler),
    ):
        result = await source.fetch_latest_status()

    assert result is not None
    assert result.last_non_zero_hr == 88


@pytest.mark.asyncio
async def test_fetch_latest_activity_with_empty_array_is_none() -> None:
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.httpx.AsyncClient",
        side_effect=_mock_transport_client(lambda request: httpx.Response(200, json=[])),
    ):
        result = await source.fetch_latest_activity()

    assert result is None


@pytest.mark.asyncio
async def test_fetch_records_rejects_non_array_body() -> None:
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.httpx.AsyncClient",
        side_effect=_mock_transport_client(
            lambda request: httpx.Response(200, json={"error": "nope"})
        ),
    ):
        with pytest.raises(ValueError):
            await source.fetch_records(source.ACTIVITY_PATH)


@pytest.mark.asyncio
async def test_fetch_records_raises_on_error_status() -> None:
    with patch.object(settings, "api_base", _API_BASE), patch(
        "gateway.services.source.httpx.AsyncClient",
        side_effect=_mock_transport_client(lambda request: httpx.Response(503)),
    ):
        with pytest.raises(httpx.HTTPStatusError):
            await source.fetch_records(source.STATUS_PATH)
