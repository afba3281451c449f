"""GeoIP database lookups.

Lookups are local memory-mapped reads, so they run inline on the event
loop and are never charged against the daily quota.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import geoip2.database
import geoip2.errors
import maxminddb

from pyposition.config import PositionConfig
from pyposition.exceptions import GeoIpLookupError, PositionConfigError
from pyposition.models.response import PositionResponse

_logger = logging.getLogger(__name__)

PROVIDER = "geoip"


class CityReader(Protocol):
    """The part of :class:`geoip2.database.Reader` used here."""

    def city(self, ip_address: str) -> Any:
        ...

    def close(self) -> None:
        ...


def open_reader(path: str) -> geoip2.database.Reader:
    """Open a City database, failing loudly on a bad path or file."""
    try:
        return geoip2.database.Reader(path)
    except (OSError, ValueError, maxminddb.InvalidDatabaseError) as exc:
        raise PositionConfigError(f"Cannot open GeoIP database {path!r}: {exc}") from exc


class GeoIpLocator:
    """Resolve IPv4 addresses to coordinates with a GeoIP2 City database."""

    def __init__(self, config: PositionConfig, reader: CityReader | None = None) -> None:
        self._config = config
        self._reader = reader

    @classmethod
    def from_config(cls, config: PositionConfig) -> GeoIpLocator:
        reader = open_reader(config.geoip_database) if config.geoip_database else None
        if reader is None:
            _logger.warning("No GeoIP database configured, IP requests will not resolve")
        return cls(config, reader)

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
            self._reader = None

    def locate(self, ipv4: str) -> PositionResponse:
        if self._reader is None:
            raise GeoIpLookupError("No GeoIP database available", provider=PROVIDER)

        try:
            record = self._reader.city(ipv4)
        except geoip2.errors.AddressNotFoundError as exc:
            raise GeoIpLookupError(f"{ipv4} not found in GeoIP database", provider=PROVIDER) from exc
        except ValueError as exc:
            raise GeoIpLookupError(f"Invalid address {ipv4!r}: {exc}", provider=PROVIDER) from exc

        latitude = record.location.latitude
        longitude = record.location.longitude
        if latitude is None or longitude is None:
            raise GeoIpLookupError(f"No coordinates for {ipv4} in GeoIP database", provider=PROVIDER)

        _logger.debug("GeoIP %s -> %s,%s", ipv4, latitude, longitude)
        return PositionResponse(
            latitude=latitude,
            longitude=longitude,
            accuracy=self._config.geoip_accuracy,
        )
