"""Remote command execution with proxy environment injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import paramiko

from sshdriver.lifecycle.errors import ActionFailed, SSHFailed

if TYPE_CHECKING:
    from sshdriver.lifecycle.transport.base import Session

TRANSPORT_ERRORS: tuple[type[Exception], ...] = (SSHFailed, paramiko.SSHException)
"""Exceptions translated to ``ActionFailed`` at the driver boundary."""


def env_command(command: str, http_proxy: str | None = None, https_proxy: str | None = None) -> str:
    """Prefix ``command`` with an ``env`` call carrying the proxy settings.

    Returns the command unmodified when no proxy is configured.
    """
    env = "env"
    if http_proxy:
        env += f" http_proxy={http_proxy}"
    if https_proxy:
        env += f" https_proxy={https_proxy}"

    return command if env == "env" else f"{env} {command}"


def run_remote(
    command: str | None,
    session: Session,
    *,
    http_proxy: str | None = None,
    https_proxy: str | None = None,
) -> None:
    """Execute one command over ``session``.

    ``None`` is a no-op so optional provisioner steps can be passed through
    unconditionally.  Transport failures surface as ``ActionFailed``.
    """
    if command is None:
        return

    try:
        session.exec(env_command(command, http_proxy, https_proxy))
    except TRANSPORT_ERRORS as e:
        raise ActionFailed(str(e)) from e
