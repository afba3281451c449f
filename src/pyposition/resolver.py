"""High-level async position resolver."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

import aiohttp

from pyposition._cache import ResolutionCache
from pyposition._transport import HttpTransport
from pyposition.config import PositionConfig
from pyposition.exceptions import PositionError, ProviderError
from pyposition.gateway import GoogleProviderGateway, ProviderGateway
from pyposition.geoip import GeoIpLocator
from pyposition.models.requests import (
    CellTowersRequest,
    GpsPositionRequest,
    GpsTimezoneRequest,
    IpAddressRequest,
    PositionRequest,
    WifiAccessPointsRequest,
)
from pyposition.models.response import PositionResponse
from pyposition.quota import QuotaCounter
from pyposition.validation import classify, is_admissible

_logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _Outcome:
    """Result of one provider dispatch.

    ``cacheable`` is ``False`` for partial answers, e.g. coordinates whose
    chained address lookup failed.
    """

    response: PositionResponse
    cacheable: bool = True


_Handler = Callable[[ProviderGateway, Any], Awaitable[_Outcome]]


class PositionResolver:
    """Resolve device positions from GPS, IP, cell or WiFi signals.

    Usage::

        async with PositionResolver(PositionConfig.from_env()) as resolver:
            position = await resolver.get({"ipAddress": {"ipv4": "8.8.8.8"}})

    Every request goes through the same gates, in order: feature flag,
    maintenance window, daily quota, request validation, cache, provider.
    Any rejection or provider failure yields ``{}``. The resolver must be
    entered with ``async with`` (or built with a ``gateway``) before
    :meth:`get` is called; otherwise :meth:`get` raises
    :class:`~pyposition.exceptions.PositionError` instead of returning ``{}``.

    ``cache`` and ``quota`` default to fresh instances; pass shared ones to
    let several resolvers account against the same budget.
    """

    def __init__(
        self,
        config: PositionConfig,
        *,
        gateway: ProviderGateway | None = None,
        cache: ResolutionCache | None = None,
        quota: QuotaCounter | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._gateway = gateway
        self._owns_gateway = False
        self._cache = cache if cache is not None else ResolutionCache()
        self._quota = quota if quota is not None else QuotaCounter()
        self._external_session = session is not None
        self._http_session = session
        self._handlers: dict[type[PositionRequest], _Handler] = {
            GpsPositionRequest: self._resolve_gps,
            IpAddressRequest: self._resolve_ip,
            GpsTimezoneRequest: self._resolve_timezone,
            CellTowersRequest: self._resolve_cells,
            WifiAccessPointsRequest: self._resolve_wifi,
        }

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PositionResolver:
        if self._gateway is None:
            self._config.validate()
            locator = GeoIpLocator.from_config(self._config)
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._gateway = GoogleProviderGateway(
                self._config,
                HttpTransport(self._config, self._http_session),
                locator,
            )
            self._owns_gateway = True
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._owns_gateway and isinstance(self._gateway, GoogleProviderGateway):
            self._gateway.close()
            self._gateway = None
            self._owns_gateway = False
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def quota(self) -> QuotaCounter:
        return self._quota

    # ------------------------------------------------------------------
    # Gates
    # ------------------------------------------------------------------

    def position_enabled(self) -> bool:
        return self._config.position_enabled

    def maintenance_valid(self) -> bool:
        return self._config.maintenance_valid

    def daily_limit(self) -> int:
        return self._config.daily_limit

    def daily_limit_reached(self) -> bool:
        return self._quota.reached(self.daily_limit())

    def daily_limit_consume(self) -> None:
        self._quota.consume()

    def daily_limit_reset(self) -> None:
        """Start a new quota day. Meant to be scheduled at local midnight."""
        self._quota.reset()

    # ------------------------------------------------------------------
    # Cache helpers over raw request mappings
    # ------------------------------------------------------------------

    def get_cache(self, request: Mapping[str, Any]) -> dict[str, Any] | None:
        position = classify(request)
        if position is None:
            return None
        return self._cache.lookup(position)

    def put_cache(self, request: Mapping[str, Any], response: Mapping[str, Any]) -> None:
        position = classify(request)
        if position is None:
            raise ValueError("Cannot cache a response for a malformed request")
        self._cache.insert(position, response)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def get(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve *request* to a position mapping, ``{}`` if it cannot be."""
        if not self.position_enabled():
            _logger.debug("Position resolving is disabled")
            return {}
        if not self.maintenance_valid():
            _logger.debug("Maintenance window is not valid, not resolving")
            return {}
        if self.daily_limit_reached():
            _logger.info("Daily limit of %d provider calls reached, not resolving", self.daily_limit())
            return {}

        position = classify(request)
        if position is None or not is_admissible(position):
            return {}

        cached = self._cache.lookup(position)
        if cached is not None:
            return cached

        gateway = self._require_gateway()
        handler = self._handlers[type(position)]
        try:
            outcome = await handler(gateway, position)
        except ProviderError as exc:
            _logger.warning("Cannot resolve %s request: %s", position.kind, exc)
            return {}
        except asyncio.TimeoutError:
            _logger.warning("Cannot resolve %s request: provider timed out", position.kind)
            return {}
        except Exception:
            _logger.exception("Unexpected failure resolving %s request", position.kind)
            return {}

        if outcome.response.is_empty:
            _logger.debug("Provider returned nothing for %s request", position.kind)
            return {}
        result = outcome.response.to_dict()
        if outcome.cacheable:
            self._cache.insert(position, result)
        return result

    resolve = get

    def _require_gateway(self) -> ProviderGateway:
        if self._gateway is None:
            raise PositionError("Resolver not initialized. Use 'async with PositionResolver(...) as resolver:'")
        return self._gateway

    # ------------------------------------------------------------------
    # Per-variant handlers
    # ------------------------------------------------------------------

    async def _with_address(self, gateway: ProviderGateway, position: PositionResponse) -> _Outcome:
        """Chain a geocode call to attach the street address to *position*."""
        if position.latitude is None or position.longitude is None:
            return _Outcome(position, cacheable=False)
        self.daily_limit_consume()
        try:
            address = await gateway.geocode(position.latitude, position.longitude)
        except (ProviderError, asyncio.TimeoutError) as exc:
            _logger.warning("Position found but address lookup failed: %s", str(exc) or "timed out")
            return _Outcome(position, cacheable=False)
        return _Outcome(position.model_copy(update={"address": address}))

    async def _resolve_gps(self, gateway: ProviderGateway, request: GpsPositionRequest) -> _Outcome:
        coords = request.gps_position
        self.daily_limit_consume()
        address = await gateway.geocode(coords.latitude, coords.longitude)
        return _Outcome(
            PositionResponse(latitude=coords.latitude, longitude=coords.longitude, address=address)
        )

    async def _resolve_ip(self, gateway: ProviderGateway, request: IpAddressRequest) -> _Outcome:
        position = await gateway.geoip(request.ip_address.ipv4)
        return await self._with_address(gateway, position)

    async def _resolve_timezone(self, gateway: ProviderGateway, request: GpsTimezoneRequest) -> _Outcome:
        coords = request.gps_timezone
        self.daily_limit_consume()
        zone = await gateway.timezone(coords.latitude, coords.longitude)
        return _Outcome(PositionResponse(timezone=zone))

    async def _resolve_cells(self, gateway: ProviderGateway, request: CellTowersRequest) -> _Outcome:
        self.daily_limit_consume()
        position = await gateway.geolocate_cells(request.radio_type, request.cell_towers)
        return await self._with_address(gateway, position)

    async def _resolve_wifi(self, gateway: ProviderGateway, request: WifiAccessPointsRequest) -> _Outcome:
        self.daily_limit_consume()
        position = await gateway.geolocate_wifi(request.wifi_access_points)
        return await self._with_address(gateway, position)
