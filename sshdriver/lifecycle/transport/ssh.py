"""paramiko-backed SSH session.

Connections are opened lazily on first use and closed on context exit.
Command output is streamed line by line to the configured logger.  Every
paramiko / socket failure is reported as ``SSHFailed``.
"""

from __future__ import annotations

import os
import posixpath
import stat
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import paramiko
from loguru import logger as default_logger

from sshdriver.lifecycle.errors import SSHFailed
from sshdriver.lifecycle.models.connection import LoginCommand

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

DEFAULT_PORT = 22
DEFAULT_RETRIES = 30
DEFAULT_RETRY_DELAY = 2.0
DEFAULT_TIMEOUT = 15.0


class SSHSession:
    """One SSH connection to a remote host.

    Recognised options (as produced by ``build_connection``):

    - ``port``, ``password``, ``keys`` (ordered key file paths)
    - ``keys_only``: do not look for keys outside ``keys``
    - ``forward_agent``: forward the local SSH agent to executed commands
    - ``paranoid``: when ``False`` unknown host keys are accepted
    - ``user_known_hosts_file``: host key file to load (``/dev/null`` skips it)
    - ``logger``: loguru-compatible logger for command output
    - ``timeout``, ``ssh_retries``, ``ssh_retry_delay``: connect/wait tuning
    """

    def __init__(
        self,
        hostname: str | None,
        username: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.hostname = hostname
        self.username = username
        self.options = dict(options or {})
        self.logger = self.options.pop("logger", None) or default_logger
        self._client: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None

    def __str__(self) -> str:
        return f"{self.username}@{self.hostname}<{self.port}>"

    @property
    def port(self) -> int:
        return int(self.options.get("port") or DEFAULT_PORT)

    # -- Context management ----------------------------------------------------

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        if self._client is not None:
            self.logger.debug("[SSH] closing connection to {}", self)
            self._client.close()
            self._client = None

    # -- Connection ------------------------------------------------------------

    def _connect_kwargs(self) -> dict[str, Any]:
        keys = [os.path.expanduser(k) for k in self.options.get("keys") or []]
        kwargs: dict[str, Any] = {
            "hostname": self.hostname,
            "port": self.port,
            "username": self.username,
            "timeout": float(self.options.get("timeout", DEFAULT_TIMEOUT)),
            "look_for_keys": not self.options.get("keys_only", False),
            "allow_agent": True,
        }
        if keys:
            kwargs["key_filename"] = keys
        if self.options.get("password"):
            kwargs["password"] = self.options["password"]
        return kwargs

    def _connection(self) -> paramiko.SSHClient:
        if self._client is not None:
            return self._client

        client = paramiko.SSHClient()
        known_hosts = self.options.get("user_known_hosts_file")
        if known_hosts and known_hosts != os.devnull and Path(known_hosts).expanduser().exists():
            client.load_host_keys(os.path.expanduser(known_hosts))
        if self.options.get("paranoid", True):
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        self.logger.debug("[SSH] opening connection to {}", self)
        try:
            client.connect(**self._connect_kwargs())
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise SSHFailed(f"SSH connection to {self} failed: {e}") from e

        self._client = client
        return client

    def _sftp_client(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            try:
                self._sftp = self._connection().open_sftp()
            except (paramiko.SSHException, OSError) as e:
                raise SSHFailed(f"SFTP session to {self} failed: {e}") from e
        return self._sftp

    # -- Public API ------------------------------------------------------------

    def exec(self, command: str) -> None:
        """Run a command, streaming combined output to the logger.

        Raises ``SSHFailed`` if the command exits non-zero.
        """
        self.logger.info("[SSH] {} (cmd: '{}')", self, command)
        transport = self._connection().get_transport()
        if transport is None:
            raise SSHFailed(f"SSH transport to {self} is not available")

        try:
            channel = transport.open_session()
            if self.options.get("forward_agent"):
                paramiko.agent.AgentRequestHandler(channel)
            channel.set_combine_stderr(True)
            channel.exec_command(command)
            with channel.makefile("r") as stream:
                for line in stream:
                    self.logger.info("{}", line.rstrip("\n"))
            exit_status = channel.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            raise SSHFailed(f"SSH command failed on {self}: {e}") from e

        if exit_status != 0:
            raise SSHFailed(f"SSH exited ({exit_status}) for command: [{command}]", exit_status=exit_status)

    def upload_path(self, local: str, remote: str) -> None:
        """Upload ``local`` (file or directory tree) into directory ``remote``."""
        local_path = Path(local)
        sftp = self._sftp_client()
        target = posixpath.join(remote, local_path.name)
        self.logger.debug("[SSH] upload {} -> {}:{}", local_path, self, target)
        try:
            self._mkdir_p(sftp, remote)
            if local_path.is_dir():
                self._upload_tree(sftp, local_path, target)
            else:
                sftp.put(str(local_path), target)
        except (paramiko.SSHException, OSError) as e:
            raise SSHFailed(f"Upload of {local_path} to {self}:{remote} failed: {e}") from e

    def login_command(self) -> LoginCommand:
        args = [
            "-o",
            "UserKnownHostsFile=/dev/null",
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "LogLevel=VERBOSE",
        ]
        if self.options.get("keys_only"):
            args += ["-o", "IdentitiesOnly=yes"]
        if self.options.get("forward_agent"):
            args += ["-o", "ForwardAgent=yes"]
        for key in self.options.get("keys") or []:
            args += ["-i", str(key)]
        if self.options.get("port"):
            args += ["-p", str(self.options["port"])]
        args.append(f"{self.username}@{self.hostname}" if self.username else str(self.hostname))
        return LoginCommand(command="ssh", arguments=args)

    def wait(self) -> None:
        """Retry connecting until the host authenticates us.

        Raises ``SSHFailed`` once ``ssh_retries`` attempts have failed.
        """
        retries = int(self.options.get("ssh_retries", DEFAULT_RETRIES))
        delay = float(self.options.get("ssh_retry_delay", DEFAULT_RETRY_DELAY))
        attempt = 0
        while True:
            attempt += 1
            try:
                self._connection()
            except SSHFailed:
                if attempt >= retries:
                    raise
                self.logger.info("Waiting for {} (attempt {}/{})...", self, attempt, retries)
                time.sleep(delay)
            else:
                self.logger.info("[SSH] {} is ready", self)
                return

    # -- Helpers ---------------------------------------------------------------

    def _mkdir_p(self, sftp: paramiko.SFTPClient, remote: str) -> None:
        parts = [p for p in remote.split("/") if p]
        current = "/" if remote.startswith("/") else ""
        for part in parts:
            current = posixpath.join(current, part) if current else part
            try:
                if stat.S_ISDIR(sftp.stat(current).st_mode or 0):
                    continue
            except FileNotFoundError:
                pass
            sftp.mkdir(current)

    def _upload_tree(self, sftp: paramiko.SFTPClient, local_dir: Path, remote_dir: str) -> None:
        self._mkdir_p(sftp, remote_dir)
        for entry in sorted(local_dir.iterdir()):
            target = posixpath.join(remote_dir, entry.name)
            if entry.is_dir():
                self._upload_tree(sftp, entry, target)
            else:
                sftp.put(str(entry), target)
