"""Resolver configuration for pyposition."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyposition._constants import (
    DEFAULT_DAILY_LIMIT,
    DEFAULT_GEOIP_ACCURACY,
    GEOCODING_URL,
    GEOLOCATION_URL,
    TIMEZONE_URL,
)
from pyposition.exceptions import PositionConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class PositionConfig:
    """Resolver configuration.

    Parameters
    ----------
    google_api_key : str
        Credential for the Google geocoding, timezone and geolocation APIs.
    position_enabled : bool
        Master switch. When ``False`` every request resolves to ``{}``.
    maintenance_valid : bool
        Whether the maintenance window is currently valid. When ``False``
        every request resolves to ``{}``.
    daily_limit : int
        Maximum number of billable provider calls per calendar day.
        Depends on the provider plan.
    geoip_database : str or None
        Path to a GeoIP2/GeoLite2 City ``.mmdb`` file. IP requests cannot
        be resolved without it.
    geoip_accuracy : int
        Accuracy radius in metres reported for GeoIP results when the
        database has none.
    request_timeout : float
        Total timeout in seconds for a single provider HTTP call.
    max_retries : int
        Extra attempts after a transport-level failure (network error,
        timeout, HTTP 5xx or 429). ``0`` disables retrying.
    retry_backoff : float
        Seconds to wait before retry *n* is ``retry_backoff * n``.
    language : str
        Language code used for geocoded addresses.
    geocoding_url, timezone_url, geolocation_url : str
        Provider endpoints. Overridable for proxies and tests.
    """

    google_api_key: str = ""
    position_enabled: bool = True
    maintenance_valid: bool = True
    daily_limit: int = DEFAULT_DAILY_LIMIT
    geoip_database: str | None = None
    geoip_accuracy: int = DEFAULT_GEOIP_ACCURACY
    request_timeout: float = 10.0
    max_retries: int = 1
    retry_backoff: float = 0.5
    language: str = "en"
    geocoding_url: str = GEOCODING_URL
    timezone_url: str = TIMEZONE_URL
    geolocation_url: str = GEOLOCATION_URL

    def validate(self) -> PositionConfig:
        """Raise :class:`PositionConfigError` if the configuration is unusable.

        Returns the config itself so it can be chained after construction.
        """
        if not self.google_api_key or not self.google_api_key.strip():
            raise PositionConfigError("google_api_key is required")
        if self.daily_limit < 0:
            raise PositionConfigError(f"daily_limit must be >= 0, got {self.daily_limit}")
        if self.request_timeout <= 0:
            raise PositionConfigError(f"request_timeout must be > 0, got {self.request_timeout}")
        if self.max_retries < 0:
            raise PositionConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        return self

    @classmethod
    def from_env(cls, **overrides: Any) -> PositionConfig:
        """Create configuration from environment variables.

        Reads ``POSITION_GOOGLE_API_KEY`` and the optional ``POSITION_*``
        variables. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        PositionConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "POSITION_GOOGLE_API_KEY": "google_api_key",
            "POSITION_GEOIP_DATABASE": "geoip_database",
            "POSITION_LANGUAGE": "language",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "position_enabled" not in overrides:
            config_kwargs["position_enabled"] = _env_bool(env.get("POSITION_ENABLED"), True)

        if "maintenance_valid" not in overrides:
            config_kwargs["maintenance_valid"] = _env_bool(env.get("POSITION_MAINTENANCE_VALID"), True)

        # numeric settings, handled separately
        _ENV_INT_MAP = {
            "POSITION_DAILY_LIMIT": "daily_limit",
            "POSITION_GEOIP_ACCURACY": "geoip_accuracy",
            "POSITION_MAX_RETRIES": "max_retries",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = int(val)
                except ValueError as exc:
                    raise PositionConfigError(f"{env_key} must be an integer, got {val!r}") from exc

        _ENV_FLOAT_MAP = {
            "POSITION_REQUEST_TIMEOUT": "request_timeout",
            "POSITION_RETRY_BACKOFF": "retry_backoff",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = float(val)
                except ValueError as exc:
                    raise PositionConfigError(f"{env_key} must be a number, got {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
