"""Tests for the shared AsyncHTTPClient."""

import asyncio

import httpx
import pytest

from portfolio_tracker.services.shared import AsyncHTTPClient, HTTPClientError, HTTPTimeoutError


def run(handler, max_retries=1, method="get_json"):
    async def _run():
        async with AsyncHTTPClient(
            base_url="https://api.test",
            max_retries=max_retries,
            headers={"X-Client": "tests"},
            transport=httpx.MockTransport(handler),
        ) as client:
            return await getattr(client, method)("/thing")

    return asyncio.run(_run())


class TestAsyncHTTPClient:
    """Test AsyncHTTPClient error mapping and retries."""

    def test_get_json_sends_default_headers(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        assert run(handler) == {"ok": True}
        assert seen[0].headers["X-Client"] == "tests"

    def test_status_error(self):
        with pytest.raises(HTTPClientError) as exc_info:
            run(lambda request: httpx.Response(503, text="maintenance"))

        assert exc_info.value.status_code == 503
        assert exc_info.value.response_body == "maintenance"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(HTTPTimeoutError):
            run(handler)

    def test_connection_error_has_no_status(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(HTTPClientError) as exc_info:
            run(handler)

        assert exc_info.value.status_code is None

    def test_connection_errors_are_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"attempt": len(calls)})

        assert run(handler, max_retries=2) == {"attempt": 2}

    def test_status_errors_are_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        with pytest.raises(HTTPClientError):
            run(handler, max_retries=3)

        assert len(calls) == 1
