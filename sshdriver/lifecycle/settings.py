"""Driver configuration loaded from SSHDRIVER_* environment variables."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sshdriver.lifecycle.errors import ConfigurationError


class DriverSettings(BaseSettings):
    """Declared defaults for an SSH-based driver.

    All fields are read from environment variables with the ``SSHDRIVER_``
    prefix.  For example, ``SSHDRIVER_COMPRESSION=xz`` maps to ``compression``.

    A driver instance owns one (frozen) settings object for its lifetime.
    Per-call runtime state (hostname, username, ...) is never stored here;
    it is merged on top of these values every time a connection is built.
    """

    model_config = SettingsConfigDict(
        env_prefix="SSHDRIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Driver defaults -------------------------------------------------------
    sudo: bool = True
    port: int = 22
    compression: str = "gzip"
    """Name of the compressor used for file transfer (see ``compression.registry``)."""

    # -- Proxy -----------------------------------------------------------------
    http_proxy: str | None = None
    https_proxy: str | None = None

    # -- Connection defaults (usually supplied by runtime state instead) --------
    username: str | None = None
    ssh_key: str | list[str] | None = None
    password: str | None = None
    forward_agent: bool | None = None

    # -- Helpers ---------------------------------------------------------------

    def to_config(self) -> dict[str, Any]:
        """Return the explicitly-valued fields as a plain mapping.

        ``None`` means "not configured" and is left out, so that presence
        checks during connection building behave like a sparse hash.
        """
        return {k: v for k, v in self.model_dump().items() if v is not None}

    def with_overrides(self, **overrides: Any) -> DriverSettings:
        """Return a copy with caller-supplied configuration applied."""
        if not overrides:
            return self
        unknown = sorted(set(overrides) - set(type(self).model_fields))
        if unknown:
            msg = f"Unknown driver configuration: {', '.join(unknown)}"
            raise ConfigurationError(msg)
        try:
            return type(self).model_validate({**self.model_dump(), **overrides})
        except ValidationError as e:
            msg = f"Invalid driver configuration: {e}"
            raise ConfigurationError(msg) from e


def get_settings() -> DriverSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``get_settings.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> DriverSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return DriverSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
