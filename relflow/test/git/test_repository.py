from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from relflow.core.result import Err, Ok
from relflow.git import repository as repo_mod
from relflow.git.repository import Repository, find_repo_root
from relflow.platform.process import ProcessError


def _fail(cmd: list[str], *, returncode: int = 1, stderr: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout="", stderr=stderr))


def test_tags_at_keeps_annotated_tags(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok("tag v3.0.0\ncommit lightweight\ntag latest_release\n")

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    result = Repository(tmp_path).tags_at("HEAD")
    assert result == Ok(("latest_release", "v3.0.0"))
    assert calls[0][:3] == ["git", "-C", str(tmp_path)]
    assert "--points-at=HEAD" in calls[0]


def test_commit_of_peels_to_commit(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    seen: list[str] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        seen.append(cmd[-1])
        return Ok("abc123\n")

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    assert Repository(tmp_path).commit_of("v3.0.0") == Ok("abc123")
    assert seen == ["refs/tags/v3.0.0^{commit}"]


def test_unknown_tag_is_none(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        return _fail(cmd)

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    assert Repository(tmp_path).tag_object_of("latest_release") == Ok(None)


def test_rev_parse_failure_is_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        return _fail(cmd, returncode=128, stderr="fatal: not a git repository")

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    result = Repository(tmp_path).commit_of("v3.0.0")
    assert isinstance(result, Err)
    assert result.error.command == "rev-parse"
    assert result.error.returncode == 128


def test_clone_tag_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok("")

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    dest = tmp_path / "releases" / "v3.0.0"
    assert Repository(tmp_path).clone_tag("v3.0.0", dest) == Ok(None)
    cmd = calls[0]
    assert cmd[cmd.index("--branch") + 1] == "v3.0.0"
    assert cmd[-2:] == [str(tmp_path), str(dest)]


def test_clone_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        return _fail(cmd, returncode=128, stderr="fatal: Remote branch v9 not found")

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    result = Repository(tmp_path).clone_tag("v9", tmp_path / "out")
    assert isinstance(result, Err)
    assert result.error.command == "clone"
    assert "v9" in result.error.message


def test_find_repo_root(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        return Ok(f"{tmp_path}\n")

    monkeypatch.setattr(repo_mod, "run_process", fake_run)

    assert find_repo_root(tmp_path / "sub") == Ok(tmp_path)


class TestSubprocess:
    """Repository queries through a mocked ``subprocess.run``."""

    @patch("subprocess.run")
    def test_tags_at_head(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git"],
            returncode=0,
            stdout="tag v2.0.0\ntag v2.0.1\n",
            stderr="",
        )

        assert Repository(tmp_path).tags_at() == Ok(("v2.0.0", "v2.0.1"))
        assert mock_run.call_args.kwargs["cwd"] == str(tmp_path)

    @patch("subprocess.run")
    def test_not_a_repository(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git"],
            returncode=128,
            stdout="",
            stderr="fatal: not a git repository (or any of the parent directories): .git\n",
        )

        result = find_repo_root(tmp_path)
        assert isinstance(result, Err)
        assert result.error.message.startswith("fatal: not a git repository")
