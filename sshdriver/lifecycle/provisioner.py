"""Provisioner interface and a sandbox-managing base implementation.

The provisioner decides what to ship and which commands to run; the driver
only borrows it for the duration of one ``converge`` call.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

from loguru import logger

DEFAULT_ROOT_PATH = "/tmp/kitchen"  # noqa: S108


@runtime_checkable
class Provisioner(Protocol):
    """What ``converge`` needs from a provisioner."""

    @property
    def sandbox_path(self) -> Path: ...

    @property
    def root_path(self) -> str: ...

    @property
    def install_command(self) -> str | None: ...

    @property
    def init_command(self) -> str | None: ...

    @property
    def prepare_command(self) -> str | None: ...

    @property
    def run_command(self) -> str | None: ...

    def create_sandbox(self) -> None: ...

    def cleanup_sandbox(self) -> None: ...


class ProvisionerBase:
    """Provisioner that stages its payload in a private temp directory.

    Subclasses populate the sandbox in ``create_sandbox`` (after calling
    ``super()``) and override whichever command properties they need; every
    command defaults to ``None`` which the driver skips.
    """

    def __init__(self, *, root_path: str = DEFAULT_ROOT_PATH) -> None:
        self._root_path = root_path
        self._sandbox_path: Path | None = None

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def sandbox_path(self) -> Path:
        if self._sandbox_path is None:
            msg = f"{type(self).__name__} sandbox has not been created"
            raise RuntimeError(msg)
        return self._sandbox_path

    @property
    def install_command(self) -> str | None:
        return None

    @property
    def init_command(self) -> str | None:
        return None

    @property
    def prepare_command(self) -> str | None:
        return None

    @property
    def run_command(self) -> str | None:
        return None

    def create_sandbox(self) -> None:
        self._sandbox_path = Path(tempfile.mkdtemp(prefix="sshdriver-sandbox-"))
        logger.info("Preparing sandbox at {}", self._sandbox_path)

    def cleanup_sandbox(self) -> None:
        """Remove the sandbox tree.  No-op if it was never created.

        Removal errors propagate; the sandbox is forgotten either way.
        """
        if self._sandbox_path is None:
            return
        logger.debug("Cleaning up local sandbox in {}", self._sandbox_path)
        sandbox, self._sandbox_path = self._sandbox_path, None
        shutil.rmtree(sandbox)
