"""Remote shell transports."""

from sshdriver.lifecycle.transport.base import Session, SessionFactory
from sshdriver.lifecycle.transport.ssh import SSHSession

__all__ = ["SSHSession", "Session", "SessionFactory"]
