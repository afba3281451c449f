from __future__ import annotations

import pytest

from pyposition.config import PositionConfig
from pyposition.exceptions import PositionConfigError


def test_defaults() -> None:
    config = PositionConfig(google_api_key="k")

    assert config.position_enabled is True
    assert config.maintenance_valid is True
    assert config.daily_limit == 100
    assert config.validate() is config


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSITION_GOOGLE_API_KEY", "env-key")
    monkeypatch.setenv("POSITION_ENABLED", "off")
    monkeypatch.setenv("POSITION_MAINTENANCE_VALID", "yes")
    monkeypatch.setenv("POSITION_DAILY_LIMIT", "250")
    monkeypatch.setenv("POSITION_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("POSITION_GEOIP_DATABASE", "/tmp/city.mmdb")

    config = PositionConfig.from_env()

    assert config.google_api_key == "env-key"
    assert config.position_enabled is False
    assert config.maintenance_valid is True
    assert config.daily_limit == 250
    assert config.request_timeout == 2.5
    assert config.geoip_database == "/tmp/city.mmdb"


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSITION_DAILY_LIMIT", "250")
    monkeypatch.setenv("POSITION_ENABLED", "0")

    config = PositionConfig.from_env(daily_limit=3, position_enabled=True)

    assert config.daily_limit == 3
    assert config.position_enabled is True


def test_unparseable_bool_keeps_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSITION_ENABLED", "maybe")

    assert PositionConfig.from_env().position_enabled is True


def test_bad_integer_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSITION_DAILY_LIMIT", "lots")

    with pytest.raises(PositionConfigError):
        PositionConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"google_api_key": "   "},
        {"google_api_key": "k", "daily_limit": -1},
        {"google_api_key": "k", "request_timeout": 0},
        {"google_api_key": "k", "max_retries": -1},
    ],
)
def test_validate_rejects(kwargs: dict) -> None:
    with pytest.raises(PositionConfigError):
        PositionConfig(**kwargs).validate()
