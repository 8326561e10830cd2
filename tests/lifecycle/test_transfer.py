"""Unit tests for the transfer pipeline (fake session + fake compressor)."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import FakeCompressor, FakeSession

from sshdriver.lifecycle.compression.passthrough import NoneCompressor
from sshdriver.lifecycle.errors import ActionFailed
from sshdriver.lifecycle.execution.runner import run_remote
from sshdriver.lifecycle.execution.transfer import transfer_path


@pytest.fixture
def supports(tmp_path: Path) -> list[Path]:
    paths = [tmp_path / "busybox", tmp_path / "xz-static"]
    for p in paths:
        p.write_bytes(b"bin")
    return paths


@pytest.mark.parametrize("locals_", [None, []])
def test_empty_locals_is_noop(tmp_path: Path, session: FakeSession, locals_: list | None) -> None:
    compressor = FakeCompressor(tmp_path)

    transfer_path(locals_, "/tmp/x", session, compressor, run=run_remote)

    assert compressor.compressed == []
    assert session.calls == []


def test_supports_then_archive_then_unpack(tmp_path: Path, session: FakeSession, supports: list[Path]) -> None:
    compressor = FakeCompressor(tmp_path, supports=supports)

    transfer_path(["a.txt"], "/tmp/x", session, compressor, run=run_remote)

    assert compressor.compressed == [["a.txt"]]
    assert session.calls == [
        ("upload", "busybox", "/tmp/x"),
        ("upload", "xz-static", "/tmp/x"),
        ("upload", "payload.tar.gz", "/tmp/x"),
        ("exec", "cd /tmp/x && tar -xzf payload.tar.gz && rm payload.tar.gz"),
    ]


def test_no_unpack_command_skips_remote_step(tmp_path: Path, session: FakeSession, supports: list[Path]) -> None:
    compressor = FakeCompressor(tmp_path, supports=supports, unpack=None)

    transfer_path(["a.txt"], "/tmp/x", session, compressor, run=run_remote)

    assert [c[0] for c in session.calls] == ["upload", "upload", "upload"]


def test_archive_cleaned_up_after_success(tmp_path: Path, session: FakeSession) -> None:
    compressor = FakeCompressor(tmp_path)

    transfer_path(["a.txt"], "/tmp/x", session, compressor, run=run_remote)

    assert not compressor.archives[0].path.exists()


def test_upload_failure_translated_and_archive_cleaned(tmp_path: Path) -> None:
    session = FakeSession("h", "u", fail_on="payload")
    compressor = FakeCompressor(tmp_path)

    with pytest.raises(ActionFailed, match="Upload of"):
        transfer_path(["a.txt"], "/tmp/x", session, compressor, run=run_remote)

    assert not compressor.archives[0].path.exists()
    assert ("exec",) not in [c[:1] for c in session.calls]


def test_unpack_failure_translated(tmp_path: Path) -> None:
    session = FakeSession("h", "u", fail_on="tar -xzf")
    compressor = FakeCompressor(tmp_path)

    with pytest.raises(ActionFailed, match="SSH exited"):
        transfer_path(["a.txt"], "/tmp/x", session, compressor, run=run_remote)


def test_unpack_runs_through_supplied_runner(tmp_path: Path, session: FakeSession) -> None:
    seen: list[str | None] = []
    compressor = FakeCompressor(tmp_path)

    transfer_path(["a.txt"], "/tmp/x", session, compressor, run=lambda cmd, conn: seen.append(cmd))

    assert seen == ["cd /tmp/x && tar -xzf payload.tar.gz && rm payload.tar.gz"]


def test_passthrough_uploads_each_path_untouched(tmp_path: Path, session: FakeSession) -> None:
    first = tmp_path / "roles"
    second = tmp_path / "site.yml"
    first.mkdir()
    second.write_text("---\n")

    transfer_path([first, second], "/tmp/kitchen", session, NoneCompressor(), run=run_remote)

    assert session.calls == [
        ("upload", "roles", "/tmp/kitchen"),
        ("upload", "site.yml", "/tmp/kitchen"),
    ]
    assert first.is_dir()
    assert second.exists()
