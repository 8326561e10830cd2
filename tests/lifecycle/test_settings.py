"""Unit tests for driver settings."""

from __future__ import annotations

import pytest

from sshdriver.lifecycle.errors import ConfigurationError
from sshdriver.lifecycle.settings import DriverSettings, _get_settings_cached, get_settings


def test_defaults(settings: DriverSettings) -> None:
    assert settings.sudo is True
    assert settings.port == 22
    assert settings.compression == "gzip"
    assert settings.http_proxy is None
    assert settings.https_proxy is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSHDRIVER_PORT", "2222")
    monkeypatch.setenv("SSHDRIVER_COMPRESSION", "xz")
    monkeypatch.setenv("SSHDRIVER_HTTP_PROXY", "http://proxy:3128")
    monkeypatch.setenv("SSHDRIVER_SUDO", "false")

    settings = DriverSettings(_env_file=None)

    assert settings.port == 2222
    assert settings.compression == "xz"
    assert settings.http_proxy == "http://proxy:3128"
    assert settings.sudo is False


def test_to_config_drops_unset(settings: DriverSettings) -> None:
    config = settings.to_config()

    assert config["port"] == 22
    assert "password" not in config
    assert "http_proxy" not in config
    assert "ssh_key" not in config


def test_settings_are_frozen(settings: DriverSettings) -> None:
    with pytest.raises(ValueError):
        settings.port = 2222  # type: ignore[misc]


def test_with_overrides_returns_copy(settings: DriverSettings) -> None:
    updated = settings.with_overrides(port=2200)

    assert updated.port == 2200
    assert settings.port == 22
    assert settings.with_overrides() is settings


def test_get_settings_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SSHDRIVER_PORT", "2022")
    _get_settings_cached.cache_clear()

    first = get_settings()
    assert first.port == 2022
    assert get_settings() is first


@pytest.mark.parametrize(
    "overrides",
    [{"port": "abc"}, {"sudo": "nope"}, {"compression": None}],
)
def test_with_overrides_validates(settings: DriverSettings, overrides: dict) -> None:
    with pytest.raises(ConfigurationError, match="Invalid driver configuration"):
        settings.with_overrides(**overrides)


def test_with_overrides_coerces_like_env(settings: DriverSettings) -> None:
    updated = settings.with_overrides(port="2200", sudo="false")

    assert updated.port == 2200
    assert updated.sudo is False
