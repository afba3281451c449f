"""Provider gateway: the only door to external lookups.

The resolver never builds HTTP requests itself; it calls the methods of a
:class:`ProviderGateway`. Every method either returns a result or raises a
:class:`~pyposition.exceptions.ProviderError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pyposition._api import geocoding as _geocoding_api
from pyposition._api import geolocation as _geolocation_api
from pyposition._api import timezone as _timezone_api
from pyposition._transport import Transport
from pyposition.config import PositionConfig
from pyposition.geoip import GeoIpLocator
from pyposition.models.requests import CellTower, WifiAccessPoint
from pyposition.models.response import Address, PositionResponse, TimeZone


class ProviderGateway(Protocol):
    """Structural interface over the external lookup services.

    ``geoip`` is free; every other call is billable.
    """

    async def geoip(self, ipv4: str) -> PositionResponse:
        ...

    async def geocode(self, latitude: float, longitude: float) -> Address:
        ...

    async def timezone(self, latitude: float, longitude: float, timestamp: int | None = None) -> TimeZone:
        ...

    async def geolocate_cells(self, radio_type: str | None, towers: Sequence[CellTower]) -> PositionResponse:
        ...

    async def geolocate_wifi(self, access_points: Sequence[WifiAccessPoint]) -> PositionResponse:
        ...


class GoogleProviderGateway:
    """Gateway backed by the Google Maps web services and a GeoIP database."""

    def __init__(self, config: PositionConfig, transport: Transport, locator: GeoIpLocator) -> None:
        self._config = config
        self._transport = transport
        self._locator = locator

    def close(self) -> None:
        self._locator.close()

    async def geoip(self, ipv4: str) -> PositionResponse:
        return self._locator.locate(ipv4)

    async def geocode(self, latitude: float, longitude: float) -> Address:
        return await _geocoding_api.reverse_geocode(self._config, self._transport, latitude, longitude)

    async def timezone(self, latitude: float, longitude: float, timestamp: int | None = None) -> TimeZone:
        return await _timezone_api.fetch_timezone(
            self._config,
            self._transport,
            latitude,
            longitude,
            timestamp=timestamp,
        )

    async def geolocate_cells(self, radio_type: str | None, towers: Sequence[CellTower]) -> PositionResponse:
        payload = _geolocation_api.build_cell_payload(radio_type, towers)
        return await _geolocation_api.geolocate(self._config, self._transport, payload)

    async def geolocate_wifi(self, access_points: Sequence[WifiAccessPoint]) -> PositionResponse:
        payload = _geolocation_api.build_wifi_payload(access_points)
        return await _geolocation_api.geolocate(self._config, self._transport, payload)
