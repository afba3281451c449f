"""Shared helpers for provider endpoint modules.

This module centralizes the most repeated patterns:
- defensive parsing of provider numbers and strings
- mapping Google ``status`` fields to exceptions

It is internal to pyposition and may change at any time.
"""

from __future__ import annotations

import math
from typing import Any

from pyposition.exceptions import ProviderResponseError

OK_STATUS = "OK"


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def raise_for_status(provider: str, response: dict[str, Any]) -> None:
    """Raise :class:`ProviderResponseError` unless ``status`` is ``OK``."""
    status = str(response.get("status", ""))
    if status == OK_STATUS:
        return
    message = response.get("error_message") or response.get("errorMessage") or ""
    raise ProviderResponseError(
        f"{provider} failed: status={status or '<missing>'} message={message}",
        provider=provider,
        status=status,
    )
