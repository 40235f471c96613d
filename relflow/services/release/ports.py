"""Collaborator interfaces consumed by the release phases.

Each protocol has one method per operation the workflow needs; production
implementations shell out to ``git``, ``gh`` and ``make``, tests substitute
in-memory fakes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from relflow.core.result import Result
from relflow.git.repository import GitError
from relflow.services.release.errors import HostFailed, ToolchainFailed
from relflow.services.release.model import ToolchainParams


class VersionControl(Protocol):
    def tags_at(self, rev: str = "HEAD") -> Result[tuple[str, ...], GitError]: ...

    def commit_of(self, tag: str) -> Result[str | None, GitError]: ...

    def tag_object_of(self, tag: str) -> Result[str | None, GitError]: ...

    def clone_tag(self, tag: str, dest: Path) -> Result[None, GitError]: ...


class Toolchain(Protocol):
    def build(self, params: ToolchainParams, *, cwd: Path) -> Result[None, ToolchainFailed]:
        """Compile the executable and build the container images."""
        ...

    def test(self, *, cwd: Path) -> Result[None, ToolchainFailed]: ...

    def push_images(self, params: ToolchainParams, *, cwd: Path) -> Result[None, ToolchainFailed]:
        """Push the built images; ``params`` says whether "latest" moves too."""
        ...

    def self_version(self, *, cwd: Path) -> Result[str, ToolchainFailed]:
        """Raw output of the built executable's version command."""
        ...


class ReleaseHost(Protocol):
    def tag_exists(self, tag_object: str) -> Result[bool, HostFailed]: ...

    def release_exists(self, tag: str) -> Result[bool, HostFailed]: ...

    def create_release(
        self,
        tag: str,
        *,
        title: str,
        notes: str,
        draft: bool,
        prerelease: bool,
    ) -> Result[None, HostFailed]: ...

    def upload_asset(self, tag: str, path: Path, *, clobber: bool = False) -> Result[None, HostFailed]: ...

    def publish_release(self, tag: str) -> Result[None, HostFailed]: ...

    def delete_release(self, tag: str) -> Result[None, HostFailed]: ...
