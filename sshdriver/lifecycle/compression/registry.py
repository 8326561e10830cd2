"""Compressor registry.

Maps a compression name (the ``compression`` setting) to a factory.  The
mapping is static; an unknown name is a configuration error.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from sshdriver.lifecycle.compression.base import Compressor
from sshdriver.lifecycle.compression.passthrough import NoneCompressor
from sshdriver.lifecycle.compression.tar import GzipCompressor, XzCompressor
from sshdriver.lifecycle.errors import ConfigurationError
from sshdriver.lifecycle.models.enums import Compression

COMPRESSOR_REGISTRY: dict[str, Callable[..., Compressor]] = {
    Compression.GZIP: GzipCompressor,
    Compression.XZ: XzCompressor,
    Compression.NONE: NoneCompressor,
}


def resolve_compressor(name: str, supports: Sequence[str | Path] = ()) -> Compressor:
    """Instantiate the compressor registered under ``name``."""
    try:
        factory = COMPRESSOR_REGISTRY[name.lower()]
    except KeyError:
        known = ", ".join(sorted(COMPRESSOR_REGISTRY))
        msg = f"Unknown compression '{name}' (expected one of: {known})"
        raise ConfigurationError(msg) from None
    return factory(supports=supports)
