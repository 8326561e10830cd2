"""Data models for the lifecycle driver."""

from sshdriver.lifecycle.models.connection import ConnectionDescriptor, LoginCommand
from sshdriver.lifecycle.models.enums import Compression

__all__ = [
    "Compression",
    "ConnectionDescriptor",
    "LoginCommand",
]
