"""Custom exception hierarchy for pyposition."""

from __future__ import annotations


class PositionError(Exception):
    """Base exception for all pyposition errors."""


class PositionConfigError(PositionError):
    """Invalid or missing configuration."""


class ProviderError(PositionError):
    """An external lookup could not produce a usable result."""

    def __init__(self, message: str, *, provider: str = "") -> None:
        self.provider = provider
        super().__init__(message)


class ProviderTransportError(ProviderError):
    """HTTP-level failure (network, timeout, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, provider=provider)


class ProviderResponseError(ProviderError):
    """Provider answered but reported an error or an empty result.

    ``status`` carries the provider status string (e.g. ``ZERO_RESULTS``,
    ``REQUEST_DENIED``) or the Geolocation API error reason.
    """

    def __init__(self, message: str, *, provider: str = "", status: str = "") -> None:
        self.status = status
        super().__init__(message, provider=provider)


class GeoIpLookupError(ProviderError):
    """Address not present in the GeoIP database, or no database available."""
