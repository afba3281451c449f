"""Geolocation endpoint (radio observations to coordinates).

Both cell and WiFi lookups go to the same API; only the request body
differs. ``considerIp`` is always off: the caller's address is the server
running this library, not the device.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pyposition._api._common import safe_float
from pyposition._transport import Transport
from pyposition.config import PositionConfig
from pyposition.exceptions import ProviderResponseError
from pyposition.models.requests import CellTower, WifiAccessPoint
from pyposition.models.response import PositionResponse

_logger = logging.getLogger(__name__)

PROVIDER = "geolocation"


def build_cell_payload(radio_type: str | None, towers: Sequence[CellTower]) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "considerIp": False,
        "cellTowers": [tower.to_wire() for tower in towers],
    }
    if radio_type:
        payload["radioType"] = radio_type
    return payload


def build_wifi_payload(access_points: Sequence[WifiAccessPoint]) -> dict[str, Any]:
    # ssid is not part of the API body
    return {
        "considerIp": False,
        "wifiAccessPoints": [
            ap.model_dump(by_alias=True, exclude_none=True, exclude={"ssid"}) for ap in access_points
        ],
    }


def _error_reason(response: dict[str, Any]) -> str:
    error = response.get("error")
    if not isinstance(error, dict):
        return ""
    errors = error.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        reason = errors[0].get("reason")
        if reason:
            return str(reason)
    return str(error.get("status") or error.get("code") or "error")


def parse_geolocation(response: dict[str, Any]) -> PositionResponse:
    """Parse a geolocation API answer into a coordinate-only response."""
    reason = _error_reason(response)
    if reason:
        raise ProviderResponseError(f"{PROVIDER} failed: {reason}", provider=PROVIDER, status=reason)

    location = response.get("location")
    location = location if isinstance(location, dict) else {}
    latitude = safe_float(location.get("lat"))
    longitude = safe_float(location.get("lng"))
    if latitude is None or longitude is None:
        raise ProviderResponseError(
            f"{PROVIDER} response has no location",
            provider=PROVIDER,
            status="INVALID_RESPONSE",
        )
    return PositionResponse(
        latitude=latitude,
        longitude=longitude,
        accuracy=safe_float(response.get("accuracy")),
    )


async def geolocate(
    config: PositionConfig,
    transport: Transport,
    payload: dict[str, Any],
) -> PositionResponse:
    params = {"key": config.google_api_key}
    response = await transport.post_json(config.geolocation_url, params, payload, provider=PROVIDER)
    position = parse_geolocation(response)
    _logger.debug(
        "Geolocated %d cell(s)/%d access point(s) -> %s,%s (accuracy=%s)",
        len(payload.get("cellTowers", [])),
        len(payload.get("wifiAccessPoints", [])),
        position.latitude,
        position.longitude,
        position.accuracy,
    )
    return position
