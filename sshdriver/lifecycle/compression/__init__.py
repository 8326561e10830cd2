"""Compressors used by the transfer pipeline."""

from sshdriver.lifecycle.compression.base import Archive, Compressor
from sshdriver.lifecycle.compression.passthrough import NoneCompressor
from sshdriver.lifecycle.compression.registry import COMPRESSOR_REGISTRY, resolve_compressor
from sshdriver.lifecycle.compression.tar import GzipCompressor, TarCompressor, XzCompressor

__all__ = [
    "COMPRESSOR_REGISTRY",
    "Archive",
    "Compressor",
    "GzipCompressor",
    "NoneCompressor",
    "TarCompressor",
    "XzCompressor",
    "resolve_compressor",
]
