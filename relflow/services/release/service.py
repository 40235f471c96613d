from __future__ import annotations

from pathlib import Path

from relflow.core.config import ReleaseConfig
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol
from relflow.services.release.build import BuildOutcome, run_build
from relflow.services.release.draft import run_draft
from relflow.services.release.errors import ReleaseError
from relflow.services.release.model import ReleaseArtifacts, ResolvedRelease
from relflow.services.release.ports import ReleaseHost, Toolchain, VersionControl
from relflow.services.release.publish import run_publish
from relflow.services.release.resolver import resolve_release


class ReleaseService:
    """Entry points for the three phases.

    Every phase starts by resolving HEAD again; nothing resolved by an earlier
    phase is trusted.
    """

    def __init__(
        self,
        *,
        repo_root: Path,
        config: ReleaseConfig,
        vcs: VersionControl,
        toolchain: Toolchain,
        host: ReleaseHost,
        console: ConsoleProtocol,
    ) -> None:
        self._root = repo_root
        self._config = config
        self._vcs = vcs
        self._toolchain = toolchain
        self._host = host
        self._console = console

    def resolve(self, phase: str) -> Result[ResolvedRelease, ReleaseError]:
        resolved = resolve_release(
            self._vcs,
            repo_root=self._root,
            releases_dir=self._config.paths.releases_dir,
        )
        if isinstance(resolved, Ok):
            r = resolved.value
            self._console.header(f"{phase} {r.name} ({r.kind}, version {r.version})")
        return resolved

    def build(self) -> Result[BuildOutcome, ReleaseError]:
        release = self.resolve("build")
        if isinstance(release, Err):
            return release
        return run_build(
            release.value,
            vcs=self._vcs,
            toolchain=self._toolchain,
            config=self._config,
            console=self._console,
        )

    def draft(self) -> Result[ReleaseArtifacts, ReleaseError]:
        release = self.resolve("draft")
        if isinstance(release, Err):
            return release
        return run_draft(
            release.value,
            host=self._host,
            config=self._config,
            console=self._console,
        )

    def publish(self) -> Result[None, ReleaseError]:
        release = self.resolve("publish")
        if isinstance(release, Err):
            return release
        return run_publish(
            release.value,
            vcs=self._vcs,
            host=self._host,
            toolchain=self._toolchain,
            config=self._config,
            console=self._console,
        )
