"""Connection resolver -- merges driver settings and runtime state into a
``ConnectionDescriptor`` ready for a session factory.

Resolution rules:

1. Start from the configured (non-``None``) settings.
2. Overlay the runtime state (state wins at key level).
3. Derive the transport options:
   - host keys are never persisted (``/dev/null``) and never checked
   - ``keys_only`` / ``keys`` only when an ``ssh_key`` is present
   - ``password`` / ``port`` only when present
   - ``forward_agent`` only when the key is present (``False`` is forwarded)
   - the logger is always attached

Pure function, no I/O.  Malformed values pass through untouched; the
transport is responsible for rejecting them.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from loguru import logger as default_logger

from sshdriver.lifecycle.models.connection import ConnectionDescriptor

KNOWN_HOSTS_FILE = os.devnull


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def build_connection(
    config: Mapping[str, Any],
    state: Mapping[str, Any],
    *,
    logger: Any = None,
) -> ConnectionDescriptor:
    """Resolve the connection for one lifecycle call."""
    combined: dict[str, Any] = {k: v for k, v in config.items() if v is not None}
    combined.update(state)

    opts: dict[str, Any] = {
        "user_known_hosts_file": KNOWN_HOSTS_FILE,
        "paranoid": False,
    }
    if combined.get("ssh_key"):
        opts["keys_only"] = True
    if combined.get("password"):
        opts["password"] = combined["password"]
    if "forward_agent" in combined:
        opts["forward_agent"] = combined["forward_agent"]
    if combined.get("port"):
        opts["port"] = combined["port"]
    if combined.get("ssh_key"):
        opts["keys"] = _as_list(combined["ssh_key"])
    opts["logger"] = logger or default_logger

    return ConnectionDescriptor(
        host=combined.get("hostname"),
        user=combined.get("username"),
        options=opts,
    )
