"""Driver error taxonomy.

Everything the lifecycle surface raises derives from ``DriverError``.
Transport-specific failures (``SSHFailed``, paramiko exceptions) are
translated to ``ActionFailed`` before they reach a caller.
"""

from __future__ import annotations


class DriverError(Exception):
    """Base class for all driver errors."""


class ClientError(DriverError):
    """A concrete driver did not supply a required lifecycle operation."""


class ActionFailed(DriverError):
    """A remote command or file transfer failed."""


class ConfigurationError(DriverError, ValueError):
    """Driver configuration names something that does not exist."""


class SSHFailed(RuntimeError):
    """Transport-level failure reported by an SSH session.

    Raised by sessions for non-zero exit statuses and connection problems.
    Never escapes the command runner or the transfer pipeline.
    """

    def __init__(self, message: str, exit_status: int | None = None) -> None:
        super().__init__(message)
        self.exit_status = exit_status
