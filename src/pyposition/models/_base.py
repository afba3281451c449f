"""Base model for pyposition requests and responses.

Every wire model inherits from :class:`PositionBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys agents and providers
  use map automatically to snake_case fields.
* ``populate_by_name`` so models can also be built from Python keywords.
* :meth:`PositionBaseModel.to_wire` which renders the camelCase mapping with
  absent fields omitted (never ``null``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PositionBaseModel(BaseModel):
    """Base for wire models exchanged with agents and providers."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase mapping, omitting unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
