"""HTTP transport for provider calls, with timeout and retry handling."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyposition._constants import RETRYABLE_STATUSES, USER_AGENT
from pyposition._redact import redact_for_log, redact_url
from pyposition.config import PositionConfig
from pyposition.exceptions import ProviderTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`HttpTransport`) concrete.
    """

    async def get_json(
        self,
        url: str,
        params: Mapping[str, str],
        *,
        provider: str,
    ) -> dict[str, Any]:
        ...

    async def post_json(
        self,
        url: str,
        params: Mapping[str, str],
        payload: Mapping[str, Any],
        *,
        provider: str,
    ) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp-backed transport.

    Each call gets ``config.request_timeout`` seconds in total. Network
    errors, timeouts and retryable HTTP statuses are retried up to
    ``config.max_retries`` times; everything else fails immediately.
    """

    def __init__(self, config: PositionConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(
        self,
        url: str,
        params: Mapping[str, str],
        *,
        provider: str,
    ) -> dict[str, Any]:
        return await self._request("GET", url, params, None, provider)

    async def post_json(
        self,
        url: str,
        params: Mapping[str, str],
        payload: Mapping[str, Any],
        *,
        provider: str,
    ) -> dict[str, Any]:
        return await self._request("POST", url, params, payload, provider)

    async def _request(
        self,
        method: str,
        url: str,
        params: Mapping[str, str],
        payload: Mapping[str, Any] | None,
        provider: str,
    ) -> dict[str, Any]:
        attempts = self._config.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await self._send(method, url, params, payload, provider)
            except ProviderTransportError as exc:
                retryable = exc.status_code is None or exc.status_code in RETRYABLE_STATUSES
                if not retryable or attempt >= attempts:
                    raise
                _logger.debug(
                    "%s attempt=%d/%d failed, retrying: %s",
                    provider,
                    attempt,
                    attempts,
                    exc,
                )
                if self._config.retry_backoff > 0:
                    await asyncio.sleep(self._config.retry_backoff * attempt)
        raise AssertionError("unreachable")  # pragma: no cover

    async def _send(
        self,
        method: str,
        url: str,
        params: Mapping[str, str],
        payload: Mapping[str, Any] | None,
        provider: str,
    ) -> dict[str, Any]:
        headers = {"accept": "application/json", "user-agent": USER_AGENT}
        body = None
        if payload is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            body = json.dumps(payload, separators=(",", ":"))

        _logger.debug(
            "%s %s params=%s",
            method,
            url,
            redact_for_log(dict(params)),
        )

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params),
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
        except asyncio.TimeoutError as exc:
            raise ProviderTransportError(
                f"Request to {provider} timed out after {self._config.request_timeout}s",
                provider=provider,
            ) from exc
        except aiohttp.ClientError as exc:
            raise ProviderTransportError(
                f"Request to {redact_url(url)} failed: {exc}",
                provider=provider,
            ) from exc

        if status != 200:
            raise ProviderTransportError(
                f"HTTP {status} from {provider}: {text[:200]}",
                provider=provider,
                status_code=status,
            )

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProviderTransportError(
                f"Invalid JSON from {provider}: {text[:200]}",
                provider=provider,
                status_code=status,
            ) from exc

        if not isinstance(result, dict):
            raise ProviderTransportError(
                f"Unexpected JSON payload from {provider}: {text[:64]}",
                provider=provider,
                status_code=status,
            )
        return result
