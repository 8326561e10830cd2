"""Shared enumerations used across the driver."""

from __future__ import annotations

from enum import StrEnum


class Compression(StrEnum):
    """Names accepted by the ``compression`` setting."""

    GZIP = "gzip"
    XZ = "xz"
    NONE = "none"
