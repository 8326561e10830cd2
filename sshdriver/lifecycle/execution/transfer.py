"""File transfer pipeline: compress, upload supports + archive, unpack."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from sshdriver.lifecycle.errors import ActionFailed
from sshdriver.lifecycle.execution.runner import TRANSPORT_ERRORS

if TYPE_CHECKING:
    from sshdriver.lifecycle.compression.base import Compressor
    from sshdriver.lifecycle.transport.base import Session


def transfer_path(
    locals_: Sequence[str | Path] | None,
    remote: str,
    session: Session,
    compressor: Compressor,
    *,
    run: Callable[[str | None, Session], None],
    target: str = "instance",
) -> None:
    """Deliver ``locals_`` into the remote directory ``remote``.

    For every archive the compressor produces, the support artifacts are
    uploaded first (in declared order), then the archive, then -- if the
    compressor has an unpack command -- one compound command unpacks it and
    removes the uploaded archive.  Archives are cleaned up locally whether or
    not the upload succeeded.

    ``run`` executes the unpack command (normally the driver's ``run_remote``).
    Transport failures surface as ``ActionFailed``.
    """
    if not locals_:
        return

    logger.info("Compress files before transferring")
    archives = compressor.compress(list(locals_))
    try:
        for archive in archives:
            filename = archive.filename

            logger.debug("Upload compression supports")
            for support in compressor.supports:
                session.upload_path(str(support), remote)

            logger.info("Transferring files to {}", target)
            session.upload_path(str(archive.path), remote)

            unpack_command = compressor.unpack_command(filename)
            if unpack_command:
                logger.debug("Decompressing files remotely")
                run(f"cd {remote} && {unpack_command} && rm {filename}", session)
    except TRANSPORT_ERRORS as e:
        raise ActionFailed(str(e)) from e
    finally:
        for archive in archives:
            archive.cleanup()

    logger.debug("Transfer complete")
