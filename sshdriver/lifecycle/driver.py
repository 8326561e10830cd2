"""SSH lifecycle driver.

``SSHBase`` turns lifecycle actions into remote command executions and file
transfers over a per-call SSH session.  Concrete backends subclass it and
implement ``create`` / ``destroy`` (the platform-specific steps that bring an
instance into existence and tear it down); every other transition is
transport-uniform and lives here::

    Unprovisioned --create--> Reachable --converge--> Converged
        --setup--> TestReady --verify--> Verified --destroy--> Unprovisioned

Every public operation resolves its connection afresh from settings + the
caller's runtime state, opens its own session and closes it on every exit
path.  Nothing is retried at this layer.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from sshdriver.lifecycle.compression.registry import resolve_compressor
from sshdriver.lifecycle.errors import ClientError
from sshdriver.lifecycle.execution.resolver import build_connection
from sshdriver.lifecycle.execution.runner import run_remote
from sshdriver.lifecycle.execution.transfer import transfer_path
from sshdriver.lifecycle.settings import DriverSettings, get_settings
from sshdriver.lifecycle.transport.ssh import SSHSession

if TYPE_CHECKING:
    from sshdriver.lifecycle.compression.base import Compressor
    from sshdriver.lifecycle.instance import Instance
    from sshdriver.lifecycle.models.connection import ConnectionDescriptor, LoginCommand
    from sshdriver.lifecycle.provisioner import Provisioner
    from sshdriver.lifecycle.transport.base import Session, SessionFactory

State = Mapping[str, Any]


class SSHBase:
    """Base class for a driver that talks to its instance over SSH.

    A subclass must implement:

    - ``create(state)``
    - ``destroy(state)``
    """

    def __init__(
        self,
        instance: Instance,
        settings: DriverSettings | None = None,
        *,
        session_factory: SessionFactory = SSHSession,
        compression_supports: Sequence[str | Path] = (),
        **config: Any,
    ) -> None:
        self.instance = instance
        self.settings = (settings or get_settings()).with_overrides(**config)
        self.session_factory = session_factory
        self._compression_supports = tuple(compression_supports)

    # -- Abstract lifecycle ----------------------------------------------------

    def create(self, state: State) -> None:
        raise ClientError(f"{type(self).__name__}#create must be implemented")

    def destroy(self, state: State) -> None:
        raise ClientError(f"{type(self).__name__}#destroy must be implemented")

    # -- Transport-uniform lifecycle -------------------------------------------

    def converge(self, state: State) -> None:
        """Ship the provisioner's sandbox and run its commands remotely.

        The sandbox is always cleaned up.  If converge failed, a cleanup
        failure is logged and the original error propagates.
        """
        provisioner: Provisioner | None = None
        try:
            provisioner = self.instance.provisioner
            provisioner.create_sandbox()
            sandbox_dirs = sorted(
                str(p) for p in Path(provisioner.sandbox_path).iterdir() if not p.name.startswith(".")
            )

            with self._open(state) as conn:
                self.run_remote(provisioner.install_command, conn)
                self.run_remote(provisioner.init_command, conn)
                self.transfer_path(sandbox_dirs, provisioner.root_path, conn)
                self.run_remote(provisioner.prepare_command, conn)
                self.run_remote(provisioner.run_command, conn)
        except BaseException:
            if provisioner is not None:
                self._cleanup_after_failure(provisioner)
            raise
        else:
            provisioner.cleanup_sandbox()

    def setup(self, state: State) -> None:
        with self._open(state) as conn:
            self.run_remote(self.instance.suite.setup_cmd, conn)

    def verify(self, state: State) -> None:
        with self._open(state) as conn:
            self.run_remote(self.instance.suite.sync_cmd, conn)
            self.run_remote(self.instance.suite.run_cmd, conn)

    def login_command(self, state: State) -> LoginCommand:
        """Interactive login invocation for the instance.  Connects to nothing."""
        return self.session_factory(*self.build_ssh_args(state).as_args()).login_command()

    def remote_command(self, state: State, command: str | None) -> None:
        with self._open(state) as conn:
            self.run_remote(command, conn)

    def ssh(self, ssh_args: Sequence[Any], command: str | None) -> None:
        """Run ``command`` using caller-resolved ``(host, user, options)`` verbatim."""
        with self.session_factory(*ssh_args) as conn:
            self.run_remote(command, conn)

    # -- Helpers for subclasses ------------------------------------------------

    def build_ssh_args(self, state: State) -> ConnectionDescriptor:
        return build_connection(self.settings.to_config(), state, logger=logger)

    def run_remote(self, command: str | None, connection: Session) -> None:
        run_remote(
            command,
            connection,
            http_proxy=self.settings.http_proxy,
            https_proxy=self.settings.https_proxy,
        )

    def transfer_path(self, locals_: Sequence[str | Path] | None, remote: str, connection: Session) -> None:
        transfer_path(
            locals_,
            remote,
            connection,
            self.compressor,
            run=self.run_remote,
            target=str(self.instance),
        )

    def wait_for_sshd(
        self,
        hostname: str,
        username: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        """Block until ``hostname`` accepts and authenticates an SSH connection."""
        session = self.session_factory(hostname, username, {"logger": logger, **(options or {})})
        try:
            session.wait()
        finally:
            session.close()

    @cached_property
    def compressor(self) -> Compressor:
        return resolve_compressor(self.settings.compression, self._compression_supports)

    # -- Internal --------------------------------------------------------------

    def _open(self, state: State) -> Session:
        return self.session_factory(*self.build_ssh_args(state).as_args())

    def _cleanup_after_failure(self, provisioner: Provisioner) -> None:
        try:
            provisioner.cleanup_sandbox()
        except Exception:
            logger.exception("Sandbox cleanup failed for {}", self.instance)
