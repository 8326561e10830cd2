"""Connection data models.

A ``ConnectionDescriptor`` is built fresh for every lifecycle call from
driver settings merged with runtime state; it is never persisted.
"""

from __future__ import annotations

import shlex
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConnectionDescriptor(BaseModel):
    """Everything a session factory needs to open a connection."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    host: str | None = None
    user: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    """Transport options: ``user_known_hosts_file``, ``paranoid``, ``keys_only``,
    ``password``, ``forward_agent``, ``port``, ``keys``, ``logger``."""

    def as_args(self) -> tuple[str | None, str | None, dict[str, Any]]:
        """Positional ``(host, user, options)`` triple for a session factory."""
        return self.host, self.user, dict(self.options)


class LoginCommand(BaseModel):
    """An interactive login invocation (program + arguments)."""

    command: str
    arguments: list[str] = Field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.arguments]

    def __str__(self) -> str:
        return shlex.join(self.argv)
