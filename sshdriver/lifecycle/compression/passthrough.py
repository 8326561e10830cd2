"""Pass-through "compressor": uploads paths as they are."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from sshdriver.lifecycle.compression.base import Archive


class NoneCompressor:
    """Every path is its own archive; nothing is unpacked remotely."""

    def __init__(self, supports: Sequence[str | Path] = ()) -> None:
        self._supports = [Path(s) for s in supports]

    @property
    def supports(self) -> list[Path]:
        return list(self._supports)

    def compress(self, paths: Sequence[str | Path]) -> list[Archive]:
        return [Archive(path=Path(p), owned=False) for p in paths]

    def unpack_command(self, filename: str) -> str | None:
        return None
