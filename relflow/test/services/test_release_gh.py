from __future__ import annotations

import json
from pathlib import Path

import pytest

from relflow.core.result import Err, Ok
from relflow.output.console import MockConsole
from relflow.platform.process import ProcessError
from relflow.services.release import gh as gh_mod
from relflow.services.release.gh import GhReleaseHost


def _err(*, stderr: str, returncode: int = 1) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("gh", "api", "repos/acme/widget"),
            returncode=returncode,
            stdout="",
            stderr=stderr,
        )
    )


def _host(tmp_path: Path, *, dry_run: bool = False, console: MockConsole | None = None) -> GhReleaseHost:
    return GhReleaseHost(
        repo_root=tmp_path,
        slug="acme/widget",
        console=console or MockConsole(),
        dry_run=dry_run,
    )


def test_tag_exists_matches_sha(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok(json.dumps({"sha": "abc123", "tag": "v3.0.0"}))

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    assert _host(tmp_path).tag_exists("abc123") == Ok(True)
    assert calls == [["gh", "api", "repos/acme/widget/git/tags/abc123"]]


def test_tag_exists_not_found(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cmd
        del cwd
        del timeout
        return _err(stderr="gh: Not Found (HTTP 404)")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    assert _host(tmp_path).tag_exists("abc123") == Ok(False)


def test_tag_exists_other_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cmd
        del cwd
        del timeout
        return _err(stderr="HTTP 503 Service Unavailable")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = _host(tmp_path).tag_exists("abc123")
    assert isinstance(result, Err)
    assert result.error.message == "HTTP 503 Service Unavailable"


def test_release_exists(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    responses = [Ok('{"tagName": "v3.0.0"}'), _err(stderr="release not found")]

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cmd
        del cwd
        del timeout
        return responses.pop(0)

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    host = _host(tmp_path)
    assert host.release_exists("v3.0.0") == Ok(True)
    assert host.release_exists("v3.0.1") == Ok(False)


def test_create_draft_prerelease_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok("")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = _host(tmp_path).create_release(
        "v2.0.0-rc1", title="widget v2.0.0-rc1", notes="notes", draft=True, prerelease=True
    )
    assert result == Ok(None)
    cmd = calls[0]
    assert cmd[:4] == ["gh", "release", "create", "v2.0.0-rc1"]
    assert "--verify-tag" in cmd
    assert "--draft" in cmd
    assert "--prerelease" in cmd
    assert cmd[cmd.index("--repo") + 1] == "acme/widget"


def test_upload_clobber_and_delete(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        return Ok("")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    host = _host(tmp_path)
    host.upload_asset("latest_release", tmp_path / "widget", clobber=True)
    host.delete_release("latest_release")
    host.publish_release("v3.0.0")

    assert calls[0][-1] == "--clobber"
    assert calls[1][:4] == ["gh", "release", "delete", "latest_release"]
    assert "--yes" in calls[1]
    assert calls[2][-1] == "--draft=false"


def test_dry_run_skips_mutations(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        raise AssertionError(f"unexpected command: {cmd}")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    console = MockConsole()
    host = _host(tmp_path, dry_run=True, console=console)
    assert host.create_release("v3.0.0", title="t", notes="n", draft=True, prerelease=False) == Ok(None)
    assert host.delete_release("latest_release") == Ok(None)
    assert console.messages == ["gh release create v3.0.0", "gh release delete latest_release"]


def test_mutation_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cmd
        del cwd
        del timeout
        return _err(stderr="HTTP 422: Validation Failed")

    monkeypatch.setattr(gh_mod, "run_process", fake_run)

    result = _host(tmp_path).publish_release("v3.0.0")
    assert isinstance(result, Err)
    assert result.error.operation == "gh release edit v3.0.0"


def test_ensure_gh_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod.shutil, "which", lambda name: None)
    result = gh_mod.ensure_gh_available()
    assert isinstance(result, Err)
    assert "gh: missing" in result.error.message
