"""Shared test fixtures: in-memory session and compressor fakes.

No network access is needed -- sessions record every call instead of
talking to a remote host.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from sshdriver.lifecycle.compression.base import Archive
from sshdriver.lifecycle.errors import SSHFailed
from sshdriver.lifecycle.models.connection import LoginCommand
from sshdriver.lifecycle.settings import DriverSettings, _get_settings_cached

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeSession:
    """Session double recording ``exec`` / ``upload_path`` calls in order."""

    def __init__(
        self,
        hostname: str | None = None,
        username: str | None = None,
        options: dict[str, Any] | None = None,
        *,
        calls: list[tuple] | None = None,
        fail_on: str | None = None,
    ) -> None:
        self.hostname = hostname
        self.username = username
        self.options = options or {}
        self.calls: list[tuple] = calls if calls is not None else []
        self.fail_on = fail_on
        self.closed = False

    def __enter__(self) -> FakeSession:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def exec(self, command: str) -> None:
        self.calls.append(("exec", command))
        if self.fail_on is not None and self.fail_on in command:
            raise SSHFailed(f"SSH exited (1) for command: [{command}]", exit_status=1)

    def upload_path(self, local: str, remote: str) -> None:
        self.calls.append(("upload", Path(local).name, remote))
        if self.fail_on is not None and self.fail_on in Path(local).name:
            raise SSHFailed(f"Upload of {local} failed")

    def login_command(self) -> LoginCommand:
        return LoginCommand(command="ssh", arguments=[f"{self.username}@{self.hostname}"])

    def wait(self) -> None:
        self.calls.append(("wait",))

    def close(self) -> None:
        self.closed = True
        self.calls.append(("close",))


class SessionRecorder:
    """Session factory that remembers every session it opened."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.sessions: list[FakeSession] = []
        self.calls: list[tuple] = []

    def __call__(
        self,
        hostname: str | None,
        username: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> FakeSession:
        session = FakeSession(hostname, username, options, calls=self.calls, fail_on=self.fail_on)
        self.sessions.append(session)
        return session

    @property
    def commands(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "exec"]


class FakeCompressor:
    """Compressor producing one owned archive in ``workdir``."""

    def __init__(
        self,
        workdir: Path,
        supports: list[Path] | None = None,
        unpack: str | None = "tar -xzf payload.tar.gz",
    ) -> None:
        self.workdir = workdir
        self._supports = supports or []
        self.unpack = unpack
        self.compressed: list[list[str]] = []
        self.archives: list[Archive] = []

    @property
    def supports(self) -> list[Path]:
        return self._supports

    def compress(self, paths: list[str]) -> list[Archive]:
        self.compressed.append([str(p) for p in paths])
        out = self.workdir / "archive" / "payload.tar.gz"
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(b"archive")
        archive = Archive(path=out)
        self.archives.append(archive)
        return [archive]

    def unpack_command(self, filename: str) -> str | None:
        return self.unpack


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop any SSHDRIVER_* variables from the environment for each test."""
    for key in list(os.environ):
        if key.startswith("SSHDRIVER_"):
            monkeypatch.delenv(key)
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


@pytest.fixture
def settings() -> DriverSettings:
    return DriverSettings(_env_file=None)


@pytest.fixture
def recorder() -> SessionRecorder:
    return SessionRecorder()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession("host", "user")
