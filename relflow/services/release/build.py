"""Build phase: isolated checkout, version stamping, toolchain, verification.

Each step stops the phase on failure. The build directory is never removed
automatically; a failed build leaves it in place and the next attempt
refuses to reuse it.
"""

from __future__ import annotations

from dataclasses import dataclass

from relflow.core.config import ReleaseConfig
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.services.release.changelog import check_changelog
from relflow.services.release.errors import (
    GitFailed,
    ReleaseError,
    StaleBuildDirectory,
    TestsFailed,
    VersionMismatch,
)
from relflow.services.release.model import ReleaseArtifacts, ResolvedRelease, ToolchainParams
from relflow.services.release.ports import Toolchain, VersionControl
from relflow.services.release.stamp import stamp_manifest, stamp_version_file
from relflow.services.release.state import BuildRecord, collect_artifacts, write_build_record


@dataclass(frozen=True, slots=True)
class BuildOutcome:
    release: ResolvedRelease
    artifacts: ReleaseArtifacts
    record: BuildRecord


def reported_version(output: str) -> str | None:
    """Version token in a ``<name> version <token>``-style output.

    The token is the last word of the first non-empty line.
    """
    for line in output.splitlines():
        words = line.split()
        if words:
            return words[-1]
    return None


def build_params(release: ResolvedRelease, config: ReleaseConfig) -> ToolchainParams:
    return ToolchainParams(
        version=release.version,
        sudo=config.release.sudo,
        registry_user=config.release.registry_user,
    )


def run_build(
    release: ResolvedRelease,
    *,
    vcs: VersionControl,
    toolchain: Toolchain,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[BuildOutcome, ReleaseError]:
    build_dir = release.build_dir

    if build_dir.exists():
        return Err(StaleBuildDirectory(path=build_dir))

    console.print(f"git clone --branch {release.name} -> {build_dir}", Style.DIM)
    build_dir.parent.mkdir(parents=True, exist_ok=True)
    cloned = vcs.clone_tag(release.name, build_dir)
    if isinstance(cloned, Err):
        return Err(GitFailed(command=cloned.error.command, message=cloned.error.message))
    console.success(f"checkout {release.name} ({release.tag.short_commit})")

    changelog = check_changelog(build_dir / config.paths.changelog, release.version)
    if isinstance(changelog, Err):
        return changelog
    console.success(f"{config.paths.changelog}: latest entry is {release.version}")

    stamped = stamp_version_file(
        build_dir / config.paths.version_file,
        pattern=config.paths.version_pattern,
        version=release.version,
    )
    if isinstance(stamped, Err):
        return stamped
    for manifest in config.paths.manifests:
        stamped = stamp_manifest(build_dir / manifest, version=release.version)
        if isinstance(stamped, Err):
            return stamped
    console.success(f"stamped version {release.version}")

    built = toolchain.build(build_params(release, config), cwd=build_dir)
    if isinstance(built, Err):
        return built

    tested = toolchain.test(cwd=build_dir)
    if isinstance(tested, Err):
        return Err(TestsFailed(returncode=tested.error.returncode))
    console.success("tests passed")

    artifacts = collect_artifacts(build_dir, config)
    if isinstance(artifacts, Err):
        return artifacts

    output = toolchain.self_version(cwd=build_dir)
    if isinstance(output, Err):
        return output
    reported = reported_version(output.value)
    if reported != release.version:
        return Err(VersionMismatch(expected=release.version, reported=reported))
    console.success(f"{config.artifact} reports {reported}")

    record = write_build_record(release)
    return Ok(BuildOutcome(release=release, artifacts=artifacts.value, record=record))
