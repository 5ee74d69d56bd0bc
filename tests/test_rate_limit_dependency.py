"""Tests for the HTTP rate limiting dependency and client address derivation."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from tasks_api.core import rate_limit
from tasks_api.core.rate_limit import (
    RATE_LIMIT_EXCEEDED_MESSAGE,
    UNKNOWN_CLIENT,
    get_client_ip,
    get_rate_limiter,
    run_rate_limit_sweeper,
)
from tasks_api.main import app


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        }
    )


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class TestGetClientIp:
    def test_forwarded_for_first_address_wins(self) -> None:
        request = _request({"X-Forwarded-For": " 1.2.3.4 , 10.0.0.1, 10.0.0.2"})
        assert get_client_ip(request) == "1.2.3.4"

    def test_forwarded_for_takes_priority(self) -> None:
        request = _request(
            {
                "X-Forwarded-For": "1.2.3.4",
                "X-Real-IP": "5.6.7.8",
                "CF-Connecting-IP": "9.9.9.9",
            }
        )
        assert get_client_ip(request) == "1.2.3.4"

    def test_real_ip_before_cdn_header(self) -> None:
        request = _request({"X-Real-IP": "5.6.7.8", "CF-Connecting-IP": "9.9.9.9"})
        assert get_client_ip(request) == "5.6.7.8"

    def test_cdn_header_used_last(self) -> None:
        assert get_client_ip(_request({"CF-Connecting-IP": "9.9.9.9"})) == "9.9.9.9"

    def test_empty_header_is_skipped(self) -> None:
        request = _request({"X-Forwarded-For": "", "X-Real-IP": "5.6.7.8"})
        assert get_client_ip(request) == "5.6.7.8"

    def test_falls_back_to_unknown(self) -> None:
        assert get_client_ip(_request({})) == UNKNOWN_CLIENT == "unknown"


class TestEnforceRateLimit:
    def test_hundred_requests_then_429(self, client: TestClient) -> None:
        headers = {"X-Forwarded-For": "1.2.3.4"}

        for _ in range(100):
            assert client.get("/health", headers=headers).status_code == 200

        response = client.get("/health", headers=headers)

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["error"] == RATE_LIMIT_EXCEEDED_MESSAGE
        assert response.headers["X-RateLimit-Limit"] == "100"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert int(response.headers["Retry-After"]) > 0
        assert int(response.headers["X-RateLimit-Reset"]) > 0

    def test_other_clients_unaffected(self, client: TestClient) -> None:
        for _ in range(100):
            client.get("/health", headers={"X-Forwarded-For": "1.2.3.4"})

        assert client.get("/health", headers={"X-Forwarded-For": "1.2.3.4"}).status_code == 429
        assert client.get("/health", headers={"X-Forwarded-For": "4.3.2.1"}).status_code == 200

    def test_rate_limit_runs_before_authentication(self, client: TestClient) -> None:
        headers = {"X-Real-IP": "7.7.7.7"}
        for _ in range(100):
            response = client.post("/v1/generate", json={"prompt": "x"}, headers=headers)
            assert response.status_code == 401

        response = client.post("/v1/generate", json={"prompt": "x"}, headers=headers)
        assert response.status_code == 429

    @patch("tasks_api.core.rate_limit.settings")
    def test_disabled_limiter_admits_everything(self, mock_settings, client: TestClient) -> None:
        mock_settings.app.rate_limit_enabled = False

        for _ in range(105):
            assert client.get("/health").status_code == 200

    @patch("tasks_api.core.rate_limit.settings")
    def test_headers_can_be_omitted(self, mock_settings, client: TestClient) -> None:
        mock_settings.app.rate_limit_enabled = True
        mock_settings.app.rate_limit_requests = 1
        mock_settings.app.rate_limit_window_seconds = 60
        mock_settings.app.rate_limit_include_headers = False

        client.get("/health")
        response = client.get("/health")

        assert response.status_code == 429
        assert "Retry-After" not in response.headers

    def test_limiter_is_process_wide(self) -> None:
        assert get_rate_limiter() is get_rate_limiter()


class _StopSweep(Exception):
    pass


class TestSweeper:
    def test_sweeper_purges_each_interval(self) -> None:
        limiter = MagicMock()
        limiter.purge_expired.return_value = 3
        sleep = AsyncMock(side_effect=[None, None, _StopSweep()])

        with patch.object(rate_limit, "get_rate_limiter", return_value=limiter), patch(
            "tasks_api.core.rate_limit.asyncio.sleep", sleep
        ):
            with pytest.raises(_StopSweep):
                asyncio.run(run_rate_limit_sweeper(60))

        assert limiter.purge_expired.call_count == 2
        sleep.assert_awaited_with(60)
