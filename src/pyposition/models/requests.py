"""Position request variants.

A request carries exactly one location signal. Each signal has its own
model; :data:`PositionRequest` is the closed union of them. The ``kind``
class variable is the stable tag used in cache fingerprints and logs.
"""

from __future__ import annotations

import ipaddress
from typing import ClassVar

from pydantic import Field, field_validator

from pyposition.models._base import PositionBaseModel


class Coordinates(PositionBaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class IpAddress(PositionBaseModel):
    ipv4: str

    @field_validator("ipv4")
    @classmethod
    def _strict_ipv4(cls, value: str) -> str:
        # ValueError here makes the whole request malformed.
        return str(ipaddress.IPv4Address(value.strip()))


class CellTower(PositionBaseModel):
    """A single GSM/UMTS/LTE cell observation."""

    mobile_country_code: int
    mobile_network_code: int
    location_area_code: int
    cell_id: int
    signal_strength: int | None = None
    timing_advance: int | None = None
    age: int | None = None


class WifiAccessPoint(PositionBaseModel):
    """A single WiFi access point observation."""

    mac_address: str = Field(min_length=1)
    signal_strength: int | None = None
    ssid: str | None = None


class GpsPositionRequest(PositionBaseModel):
    """A GPS fix to turn into a street address."""

    kind: ClassVar[str] = "gps"

    gps_position: Coordinates


class IpAddressRequest(PositionBaseModel):
    """A public IPv4 address to locate through the GeoIP database."""

    kind: ClassVar[str] = "ip"

    ip_address: IpAddress


class GpsTimezoneRequest(PositionBaseModel):
    """A GPS fix to turn into timezone offsets."""

    kind: ClassVar[str] = "timezone"

    gps_timezone: Coordinates


class CellTowersRequest(PositionBaseModel):
    """Cell tower observations to locate through the geolocation API."""

    kind: ClassVar[str] = "cell"

    cell_towers: list[CellTower] = Field(min_length=1)
    radio_type: str | None = None


class WifiAccessPointsRequest(PositionBaseModel):
    """WiFi access point observations to locate through the geolocation API."""

    kind: ClassVar[str] = "wifi"

    wifi_access_points: list[WifiAccessPoint] = Field(min_length=1)


PositionRequest = (
    GpsPositionRequest | IpAddressRequest | GpsTimezoneRequest | CellTowersRequest | WifiAccessPointsRequest
)
