"""Session interface consumed by the lifecycle driver.

A session is a scoped handle onto one remote host.  Drivers open one per
lifecycle call, use it as a context manager and never share it across calls.
Implementations raise ``SSHFailed`` for transport-level failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from sshdriver.lifecycle.models.connection import LoginCommand


@runtime_checkable
class Session(Protocol):
    """Synchronous protocol for a remote shell session."""

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    def exec(self, command: str) -> None:
        """Run a command remotely, blocking until it exits.  Raises ``SSHFailed``."""
        ...

    def upload_path(self, local: str, remote: str) -> None:
        """Upload a file or directory tree into the remote directory."""
        ...

    def login_command(self) -> LoginCommand:
        """Return an interactive login invocation.  Opens no connection."""
        ...

    def wait(self) -> None:
        """Block until the endpoint accepts and authenticates a connection."""
        ...

    def close(self) -> None:
        """Release the connection.  No-op if never opened."""
        ...


class SessionFactory(Protocol):
    """Callable producing a session from ``(host, user, options)``."""

    def __call__(self, hostname: str | None, username: str | None = None, options: dict[str, Any] | None = None) -> Session: ...
