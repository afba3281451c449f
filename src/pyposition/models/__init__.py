"""Pydantic models for position requests and responses."""

from pyposition.models.requests import (
    CellTower,
    CellTowersRequest,
    Coordinates,
    GpsPositionRequest,
    GpsTimezoneRequest,
    IpAddress,
    IpAddressRequest,
    PositionRequest,
    WifiAccessPoint,
    WifiAccessPointsRequest,
)
from pyposition.models.response import Address, PositionResponse, TimeZone

__all__ = [
    "Address",
    "CellTower",
    "CellTowersRequest",
    "Coordinates",
    "GpsPositionRequest",
    "GpsTimezoneRequest",
    "IpAddress",
    "IpAddressRequest",
    "PositionRequest",
    "PositionResponse",
    "TimeZone",
    "WifiAccessPoint",
    "WifiAccessPointsRequest",
]
