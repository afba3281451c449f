"""Reverse geocoding endpoint (coordinates to street address)."""

from __future__ import annotations

import logging

from pyposition._api._common import raise_for_status, safe_str
from pyposition._transport import Transport
from pyposition.config import PositionConfig
from pyposition.exceptions import ProviderResponseError
from pyposition.models.response import Address

_logger = logging.getLogger(__name__)

PROVIDER = "geocoding"


async def reverse_geocode(
    config: PositionConfig,
    transport: Transport,
    latitude: float,
    longitude: float,
) -> Address:
    """Resolve coordinates to the best matching formatted address.

    Raises
    ------
    ProviderResponseError
        If the API reports an error or returns no usable result.
    ProviderTransportError
        If the HTTP call itself fails.
    """
    params = {
        "latlng": f"{latitude},{longitude}",
        "language": config.language,
        "key": config.google_api_key,
    }
    response = await transport.get_json(config.geocoding_url, params, provider=PROVIDER)
    raise_for_status(PROVIDER, response)

    results = response.get("results")
    if not isinstance(results, list) or not results:
        raise ProviderResponseError(f"{PROVIDER} returned no results", provider=PROVIDER, status="ZERO_RESULTS")

    first = results[0] if isinstance(results[0], dict) else {}
    text = safe_str(first.get("formatted_address"))
    if text is None:
        raise ProviderResponseError(
            f"{PROVIDER} result has no formatted_address",
            provider=PROVIDER,
            status="INVALID_RESPONSE",
        )

    _logger.debug("Geocoded %s,%s -> %s", latitude, longitude, text)
    return Address(text=text)
