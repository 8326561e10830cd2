"""Compressor interface and the archive value it produces."""

from __future__ import annotations

import contextlib
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Archive:
    """A local artifact ready for upload.

    ``owned`` archives were created by the compressor in a private temporary
    directory and are deleted by ``cleanup()``.  Pass-through archives point
    at the caller's own files and are left alone.
    """

    path: Path
    owned: bool = True

    @property
    def filename(self) -> str:
        return self.path.name

    def cleanup(self) -> None:
        if not self.owned:
            return
        with contextlib.suppress(FileNotFoundError):
            self.path.unlink()
        with contextlib.suppress(OSError):
            os.rmdir(self.path.parent)


@runtime_checkable
class Compressor(Protocol):
    """Packs local paths for transfer and knows how to unpack them remotely."""

    @property
    def supports(self) -> Sequence[Path]:
        """Support artifacts to upload before any archive, in upload order."""
        ...

    def compress(self, paths: Sequence[str | Path]) -> list[Archive]:
        """Produce archives for ``paths``.  The caller must ``cleanup()`` each one."""
        ...

    def unpack_command(self, filename: str) -> str | None:
        """Remote command that unpacks ``filename`` in place, or ``None``."""
        ...
