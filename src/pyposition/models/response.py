"""Position response model."""

from __future__ import annotations

from typing import Any

from pyposition.models._base import PositionBaseModel


class Address(PositionBaseModel):
    text: str


class TimeZone(PositionBaseModel):
    """Timezone of a location.

    Parameters
    ----------
    time_zone_id : str
        IANA timezone name (e.g. ``"Europe/Rome"``).
    raw_offset : int
        Offset from UTC in seconds, without daylight saving.
    dst_offset : int
        Daylight saving offset in seconds (``0`` outside DST).
    """

    time_zone_id: str
    raw_offset: int
    dst_offset: int


class PositionResponse(PositionBaseModel):
    """Normalized answer for every request kind.

    All fields are optional; an instance with no fields set means the
    position could not be resolved.
    """

    latitude: float | None = None
    longitude: float | None = None
    accuracy: float | None = None
    address: Address | None = None
    timezone: TimeZone | None = None

    @property
    def is_empty(self) -> bool:
        return not self.to_wire()

    def to_dict(self) -> dict[str, Any]:
        """Mapping returned to callers of the resolver."""
        return self.to_wire()
