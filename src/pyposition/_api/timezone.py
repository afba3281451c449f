"""Time zone endpoint (coordinates to timezone offsets)."""

from __future__ import annotations

import logging
import time

from pydantic import ValidationError

from pyposition._api._common import raise_for_status
from pyposition._transport import Transport
from pyposition.config import PositionConfig
from pyposition.exceptions import ProviderResponseError
from pyposition.models.response import TimeZone

_logger = logging.getLogger(__name__)

PROVIDER = "timezone"


async def fetch_timezone(
    config: PositionConfig,
    transport: Transport,
    latitude: float,
    longitude: float,
    *,
    timestamp: int | None = None,
) -> TimeZone:
    """Resolve coordinates to timezone id and offsets.

    ``timestamp`` (epoch seconds, default now) decides whether daylight
    saving applies to ``dst_offset``.
    """
    if timestamp is None:
        timestamp = int(time.time())

    params = {
        "location": f"{latitude},{longitude}",
        "timestamp": str(timestamp),
        "language": config.language,
        "key": config.google_api_key,
    }
    response = await transport.get_json(config.timezone_url, params, provider=PROVIDER)
    raise_for_status(PROVIDER, response)

    try:
        zone = TimeZone.model_validate(response)
    except ValidationError as exc:
        raise ProviderResponseError(
            f"{PROVIDER} response is incomplete: {exc.error_count()} invalid field(s)",
            provider=PROVIDER,
            status="INVALID_RESPONSE",
        ) from exc

    _logger.debug("Timezone for %s,%s -> %s", latitude, longitude, zone.time_zone_id)
    return zone
