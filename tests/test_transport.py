from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from typing import Any

import aiohttp
import pytest

from pyposition._transport import HttpTransport
from pyposition.config import PositionConfig
from pyposition.exceptions import ProviderTransportError


def _transport(monkeypatch: pytest.MonkeyPatch, outcomes: list[Any], **config: Any) -> tuple[HttpTransport, list[int]]:
    transport = HttpTransport(
        PositionConfig(google_api_key="test-key", retry_backoff=0, **config),
        None,  # type: ignore[arg-type]
    )
    attempts: list[int] = []

    async def fake_send(
        method: str,
        url: str,
        params: Mapping[str, str],
        payload: Mapping[str, Any] | None,
        provider: str,
    ) -> dict[str, Any]:
        attempts.append(1)
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(transport, "_send", fake_send)
    return transport, attempts


@pytest.mark.asyncio
async def test_retries_network_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    transport, attempts = _transport(
        monkeypatch,
        [ProviderTransportError("connection reset", provider="geocoding"), {"status": "OK"}],
        max_retries=1,
    )

    assert await transport.get_json("https://example.invalid", {}, provider="geocoding") == {"status": "OK"}
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_retries_server_errors_until_exhausted(monkeypatch: pytest.MonkeyPatch) -> None:
    transport, attempts = _transport(
        monkeypatch,
        [ProviderTransportError("HTTP 503", provider="timezone", status_code=503) for _ in range(3)],
        max_retries=2,
    )

    with pytest.raises(ProviderTransportError) as exc_info:
        await transport.get_json("https://example.invalid", {}, provider="timezone")

    assert exc_info.value.status_code == 503
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_client_errors_are_not_retried(monkeypatch: pytest.MonkeyPatch) -> None:
    transport, attempts = _transport(
        monkeypatch,
        [ProviderTransportError("HTTP 404", provider="geolocation", status_code=404), {"ok": True}],
        max_retries=3,
    )

    with pytest.raises(ProviderTransportError):
        await transport.post_json("https://example.invalid", {}, {"considerIp": False}, provider="geolocation")

    assert len(attempts) == 1


@pytest.mark.asyncio
async def test_no_retries_when_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    transport, attempts = _transport(
        monkeypatch,
        [ProviderTransportError("timeout", provider="geocoding"), {"status": "OK"}],
        max_retries=0,
    )

    with pytest.raises(ProviderTransportError):
        await transport.get_json("https://example.invalid", {}, provider="geocoding")

    assert len(attempts) == 1


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text


class _FakeRequest:
    def __init__(self, outcome: Any) -> None:
        self._outcome = outcome

    async def __aenter__(self) -> _FakeResponse:
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self._outcome

    async def __aexit__(self, *exc: Any) -> None:
        return None


class FakeSession:
    """Stand-in for ``aiohttp.ClientSession`` serving canned replies in order."""

    def __init__(self, *outcomes: Any) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeRequest:
        self.calls.append({"method": method, "url": url, **kwargs})
        return _FakeRequest(self._outcomes.pop(0))


def _http(session: FakeSession, **config: Any) -> HttpTransport:
    config.setdefault("max_retries", 0)
    return HttpTransport(
        PositionConfig(google_api_key="test-key", retry_backoff=0, **config),
        session,  # type: ignore[arg-type]
    )


@pytest.mark.asyncio
async def test_send_returns_json_object() -> None:
    session = FakeSession(_FakeResponse(200, '{"status": "OK", "results": []}'))

    result = await _http(session).get_json("https://example.invalid", {"key": "k"}, provider="geocoding")

    assert result == {"status": "OK", "results": []}
    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["params"] == {"key": "k"}
    assert session.calls[0]["data"] is None


@pytest.mark.asyncio
async def test_send_posts_json_body() -> None:
    session = FakeSession(_FakeResponse(200, '{"location": {"lat": 1.0, "lng": 2.0}}'))

    await _http(session).post_json("https://example.invalid", {}, {"considerIp": False}, provider="geolocation")

    call = session.calls[0]
    assert call["method"] == "POST"
    assert json.loads(call["data"]) == {"considerIp": False}
    assert call["headers"]["content-type"].startswith("application/json")


@pytest.mark.asyncio
async def test_send_maps_timeout() -> None:
    session = FakeSession(asyncio.TimeoutError())

    with pytest.raises(ProviderTransportError) as exc_info:
        await _http(session).get_json("https://example.invalid", {}, provider="timezone")

    assert exc_info.value.status_code is None
    assert exc_info.value.provider == "timezone"


@pytest.mark.asyncio
async def test_send_maps_connection_errors() -> None:
    session = FakeSession(aiohttp.ClientConnectionError("connection refused"))

    with pytest.raises(ProviderTransportError) as exc_info:
        await _http(session).get_json("https://example.invalid?key=secret", {}, provider="geocoding")

    assert exc_info.value.status_code is None
    assert "secret" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_send_reports_http_status() -> None:
    session = FakeSession(_FakeResponse(403, "forbidden"))

    with pytest.raises(ProviderTransportError) as exc_info:
        await _http(session).get_json("https://example.invalid", {}, provider="geocoding")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_send_rejects_invalid_json() -> None:
    session = FakeSession(_FakeResponse(200, "<html>oops</html>"))

    with pytest.raises(ProviderTransportError) as exc_info:
        await _http(session).get_json("https://example.invalid", {}, provider="geocoding")

    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
async def test_send_rejects_non_object_json() -> None:
    session = FakeSession(_FakeResponse(200, "[1, 2, 3]"))

    with pytest.raises(ProviderTransportError):
        await _http(session).get_json("https://example.invalid", {}, provider="geocoding")


@pytest.mark.asyncio
async def test_server_error_is_retried_through_send() -> None:
    session = FakeSession(_FakeResponse(503, "unavailable"), _FakeResponse(200, '{"status": "OK"}'))

    result = await _http(session, max_retries=1).get_json("https://example.invalid", {}, provider="timezone")

    assert result == {"status": "OK"}
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_timeout_is_retried_through_send() -> None:
    session = FakeSession(asyncio.TimeoutError(), _FakeResponse(200, '{"status": "OK"}'))

    result = await _http(session, max_retries=1).get_json("https://example.invalid", {}, provider="timezone")

    assert result == {"status": "OK"}
    assert len(session.calls) == 2
