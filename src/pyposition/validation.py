"""Request classification and address checks.

Everything here is pure: no cache, quota or provider access.
"""

from __future__ import annotations

import ipaddress
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from pyposition._constants import (
    KEY_CELL_TOWERS,
    KEY_GPS_POSITION,
    KEY_GPS_TIMEZONE,
    KEY_IP_ADDRESS,
    KEY_RADIO_TYPE,
    KEY_WIFI_ACCESS_POINTS,
)
from pyposition.models.requests import (
    CellTowersRequest,
    GpsPositionRequest,
    GpsTimezoneRequest,
    IpAddressRequest,
    PositionRequest,
    WifiAccessPointsRequest,
)

_logger = logging.getLogger(__name__)

# signature key -> (variant, companion keys copied along with the signature)
_SHAPES: tuple[tuple[str, type[PositionRequest], tuple[str, ...]], ...] = (
    (KEY_GPS_POSITION, GpsPositionRequest, ()),
    (KEY_IP_ADDRESS, IpAddressRequest, ()),
    (KEY_GPS_TIMEZONE, GpsTimezoneRequest, ()),
    (KEY_CELL_TOWERS, CellTowersRequest, (KEY_RADIO_TYPE,)),
    (KEY_WIFI_ACCESS_POINTS, WifiAccessPointsRequest, ()),
)

_NON_ROUTABLE_NETWORKS: tuple[ipaddress.IPv4Network, ...] = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
    ipaddress.IPv4Network("169.254.0.0/16"),
    ipaddress.IPv4Network("127.0.0.0/8"),
)


def _stringify_keys(value: Any) -> Any:
    """Recursively turn mapping keys into strings.

    Agents are not consistent about key types; ``{radioType: "gsm"}`` built
    from symbols or enums must classify the same as plain strings.
    """
    if isinstance(value, Mapping):
        return {str(k): _stringify_keys(v) for k, v in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_stringify_keys(v) for v in value]
    return value


def classify(request: Any) -> PositionRequest | None:
    """Return the typed request variant, or ``None`` when malformed.

    The first signature key present decides the variant; its payload must
    then validate, otherwise the request is malformed even if a later
    signature key would have matched.
    """
    if not isinstance(request, Mapping) or not request:
        return None

    data = _stringify_keys(request)
    for key, model, companions in _SHAPES:
        if key not in data:
            continue
        payload = {key: data[key]}
        for companion in companions:
            if data.get(companion) is not None:
                payload[companion] = data[companion]
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            _logger.debug("Malformed %s request: %s", key, exc.errors(include_url=False))
            return None

    _logger.debug("Unrecognized request keys: %s", sorted(data))
    return None


def is_public_ipv4(value: str) -> bool:
    """Return ``True`` if *value* is a routable IPv4 literal.

    Private, loopback, link-local and other reserved ranges are rejected,
    as is anything that does not parse as IPv4.
    """
    try:
        address = ipaddress.IPv4Address(str(value).strip())
    except ValueError:
        return False
    if any(address in network for network in _NON_ROUTABLE_NETWORKS):
        return False
    return address.is_global and not address.is_multicast


def is_admissible(request: PositionRequest) -> bool:
    """Whether a well-formed request may be looked up at all.

    Only IP requests carry such a constraint: the address must be routable.
    """
    if isinstance(request, IpAddressRequest) and not is_public_ipv4(request.ip_address.ipv4):
        _logger.debug("Refusing to locate non-routable address %s", request.ip_address.ipv4)
        return False
    return True
