from __future__ import annotations

import json
import shutil
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.core.structured import as_str_dict, get_str
from relflow.output.console import ConsoleProtocol, Style
from relflow.platform.process import ProcessError
from relflow.platform.process import run as run_process
from relflow.services.release.errors import HostFailed

_NOT_FOUND_MARKERS = (
    "http 404",
    "release not found",
)


def _is_not_found(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def ensure_gh_available() -> Result[None, HostFailed]:
    if shutil.which("gh") is None:
        return Err(
            HostFailed(
                operation="gh",
                message="gh: missing (install GitHub CLI: https://cli.github.com/)",
            )
        )
    return Ok(None)


class GhReleaseHost:
    """Release records on GitHub, driven through the ``gh`` CLI.

    Reads always run. Mutations are echoed first and skipped under
    ``dry_run``. There is no retry and no timeout: a failed call stops the
    phase and the operator re-runs it.
    """

    def __init__(
        self,
        *,
        repo_root: Path,
        slug: str,
        console: ConsoleProtocol,
        dry_run: bool = False,
    ) -> None:
        self._root = repo_root
        self._slug = slug
        self._console = console
        self._dry_run = dry_run

    # -- reads ----------------------------------------------------------------

    def tag_exists(self, tag_object: str) -> Result[bool, HostFailed]:
        """True if the annotated tag object ``tag_object`` has been pushed."""
        endpoint = f"repos/{self._slug}/git/tags/{tag_object}"
        result = run_process(["gh", "api", endpoint], cwd=self._root)
        if isinstance(result, Err):
            if _is_not_found(result.error):
                return Ok(False)
            return Err(HostFailed(operation=f"gh api {endpoint}", message=result.error.detail))

        try:
            obj: object = json.loads(result.value)
        except json.JSONDecodeError as e:
            return Err(HostFailed(operation=f"gh api {endpoint}", message=f"invalid JSON: {e}"))

        data = as_str_dict(obj)
        if data is None:
            return Err(HostFailed(operation=f"gh api {endpoint}", message="unexpected payload"))
        return Ok(get_str(data, "sha") == tag_object)

    def release_exists(self, tag: str) -> Result[bool, HostFailed]:
        result = run_process(
            ["gh", "release", "view", tag, "--repo", self._slug, "--json", "tagName"],
            cwd=self._root,
        )
        if isinstance(result, Err):
            if _is_not_found(result.error):
                return Ok(False)
            return Err(HostFailed(operation=f"gh release view {tag}", message=result.error.detail))
        return Ok(True)

    # -- mutations ------------------------------------------------------------

    def create_release(
        self,
        tag: str,
        *,
        title: str,
        notes: str,
        draft: bool,
        prerelease: bool,
    ) -> Result[None, HostFailed]:
        cmd = [
            "gh",
            "release",
            "create",
            tag,
            "--repo",
            self._slug,
            "--verify-tag",
            "--title",
            title,
            "--notes",
            notes,
        ]
        if draft:
            cmd.append("--draft")
        if prerelease:
            cmd.append("--prerelease")
        return self._mutate(f"gh release create {tag}", cmd)

    def upload_asset(self, tag: str, path: Path, *, clobber: bool = False) -> Result[None, HostFailed]:
        cmd = ["gh", "release", "upload", tag, str(path), "--repo", self._slug]
        if clobber:
            cmd.append("--clobber")
        return self._mutate(f"gh release upload {tag} {path.name}", cmd)

    def publish_release(self, tag: str) -> Result[None, HostFailed]:
        cmd = ["gh", "release", "edit", tag, "--repo", self._slug, "--draft=false"]
        return self._mutate(f"gh release edit {tag}", cmd)

    def delete_release(self, tag: str) -> Result[None, HostFailed]:
        # The git tag stays: only the hosted record goes.
        cmd = ["gh", "release", "delete", tag, "--repo", self._slug, "--yes"]
        return self._mutate(f"gh release delete {tag}", cmd)

    def _mutate(self, label: str, cmd: list[str]) -> Result[None, HostFailed]:
        self._console.print(label, Style.DIM)
        if self._dry_run:
            return Ok(None)

        result = run_process(cmd, cwd=self._root)
        if isinstance(result, Err):
            return Err(HostFailed(operation=label, message=result.error.detail))
        return Ok(None)
