"""tar-based compressors.

Each local path is added under its base name, so unpacking in the remote
root reproduces the top-level layout of the sandbox.
"""

from __future__ import annotations

import shlex
import tarfile
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar

from loguru import logger

from sshdriver.lifecycle.compression.base import Archive


class TarCompressor:
    """Bundle all paths into one tar archive in a private temp directory."""

    mode: ClassVar[str] = "w"
    suffix: ClassVar[str] = ".tar"
    unpack_flags: ClassVar[str] = "-xf"

    def __init__(self, supports: Sequence[str | Path] = ()) -> None:
        self._supports = [Path(s) for s in supports]

    @property
    def supports(self) -> list[Path]:
        return list(self._supports)

    def compress(self, paths: Sequence[str | Path]) -> list[Archive]:
        workdir = Path(tempfile.mkdtemp(prefix="sshdriver-"))
        archive = Archive(path=workdir / f"payload{self.suffix}")
        try:
            with tarfile.open(archive.path, self.mode) as tf:
                for p in paths:
                    p = Path(p)
                    tf.add(p, arcname=p.name)
        except BaseException:
            archive.cleanup()
            raise
        logger.debug("Compressed {} path(s) into {}", len(paths), archive.path)
        return [archive]

    def unpack_command(self, filename: str) -> str | None:
        return f"tar {self.unpack_flags} {shlex.quote(filename)}"


class GzipCompressor(TarCompressor):
    mode = "w:gz"
    suffix = ".tar.gz"
    unpack_flags = "-xzf"


class XzCompressor(TarCompressor):
    mode = "w:xz"
    suffix = ".tar.xz"
    unpack_flags = "-xJf"
