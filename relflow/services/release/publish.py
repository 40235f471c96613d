"""Publish phase: make the draft public, push images, move the "latest" pointers.

Prereleases only push their images and undraft their record. Mainline and
branch releases additionally require that the operator has already moved the
``latest_release`` tag onto the release commit and pushed it; the phase
checks that, then replaces the release record bound to the marker.

Re-running is safe: image pushes and undrafting are idempotent, and the
marker record is deleted only if present and re-uploaded with overwrite, so
a run interrupted between delete and create is completed by the next run.
"""

from __future__ import annotations

from relflow.core.config import ReleaseConfig
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.services.release.errors import (
    GitFailed,
    LatestMarkerStale,
    MarkerNotAnnotated,
    MarkerNotPushed,
    ReleaseError,
    ReleaseMissing,
)
from relflow.services.release.model import (
    LATEST_MARKER,
    ReleaseArtifacts,
    ResolvedRelease,
    ToolchainParams,
)
from relflow.services.release.ports import ReleaseHost, Toolchain, VersionControl
from relflow.services.release.state import collect_artifacts, require_verified_build


def publish_params(release: ResolvedRelease, config: ReleaseConfig) -> ToolchainParams:
    return ToolchainParams(
        version=release.version,
        sudo=config.release.sudo,
        registry_user=config.release.registry_user,
        update_latest=release.kind.updates_latest,
        publish_version_db=release.kind.publishes_version_db,
    )


def marker_notes(release: ResolvedRelease, config: ReleaseConfig) -> str:
    url = f"https://github.com/{config.release.slug}/releases/tag/{release.name}"
    return (
        f"{config.release.release_description}\n\n"
        f"This release always points at the latest stable version, "
        f"currently {release.name}: {url}"
    )


def check_latest_marker(
    release: ResolvedRelease,
    *,
    vcs: VersionControl,
    host: ReleaseHost,
) -> Result[None, ReleaseError]:
    """The marker must already sit on the release commit, locally and remotely."""
    marker_commit = vcs.commit_of(LATEST_MARKER)
    if isinstance(marker_commit, Err):
        return Err(GitFailed(command=marker_commit.error.command, message=marker_commit.error.message))
    if marker_commit.value != release.tag.commit:
        return Err(
            LatestMarkerStale(
                tag=release.name,
                tag_commit=release.tag.commit,
                marker=LATEST_MARKER,
                marker_commit=marker_commit.value,
            )
        )

    marker_object = vcs.tag_object_of(LATEST_MARKER)
    if isinstance(marker_object, Err):
        return Err(GitFailed(command=marker_object.error.command, message=marker_object.error.message))
    if marker_object.value is None:
        return Err(GitFailed(command="rev-parse", message=f"tag vanished: {LATEST_MARKER}"))
    if marker_object.value == marker_commit.value:
        return Err(MarkerNotAnnotated(marker=LATEST_MARKER, tag=release.name))

    pushed = host.tag_exists(marker_object.value)
    if isinstance(pushed, Err):
        return pushed
    if not pushed.value:
        return Err(MarkerNotPushed(marker=LATEST_MARKER, tag_object=marker_object.value))
    return Ok(None)


def refresh_marker_release(
    release: ResolvedRelease,
    artifacts: ReleaseArtifacts,
    *,
    host: ReleaseHost,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Replace the release record bound to the marker tag."""
    exists = host.release_exists(LATEST_MARKER)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        deleted = host.delete_release(LATEST_MARKER)
        if isinstance(deleted, Err):
            return deleted

    created = host.create_release(
        LATEST_MARKER,
        title=f"{config.release.release_name} latest release ({release.name})",
        notes=marker_notes(release, config),
        draft=False,
        prerelease=False,
    )
    if isinstance(created, Err):
        console.warning(f"no release record for {LATEST_MARKER} right now")
        console.print("hint: re-run: relflow publish", Style.DIM)
        return created

    for path in artifacts.all:
        uploaded = host.upload_asset(LATEST_MARKER, path, clobber=True)
        if isinstance(uploaded, Err):
            return uploaded
    return Ok(None)


def run_publish(
    release: ResolvedRelease,
    *,
    vcs: VersionControl,
    host: ReleaseHost,
    toolchain: Toolchain,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    verified = require_verified_build(release)
    if isinstance(verified, Err):
        return verified
    artifacts = collect_artifacts(release.build_dir, config)
    if isinstance(artifacts, Err):
        return artifacts

    if release.kind.updates_latest:
        marker = check_latest_marker(release, vcs=vcs, host=host)
        if isinstance(marker, Err):
            return marker
        console.success(f"{LATEST_MARKER} is at {release.tag.short_commit} and pushed")

    exists = host.release_exists(release.name)
    if isinstance(exists, Err):
        return exists
    if not exists.value:
        return Err(ReleaseMissing(tag=release.name))

    pushed = toolchain.push_images(publish_params(release, config), cwd=release.build_dir)
    if isinstance(pushed, Err):
        return pushed
    console.success(f"images pushed for {release.version}")

    published = host.publish_release(release.name)
    if isinstance(published, Err):
        return published
    console.success(f"release {release.name} is public")

    if not release.kind.updates_latest:
        return Ok(None)

    refreshed = refresh_marker_release(
        release,
        artifacts.value,
        host=host,
        config=config,
        console=console,
    )
    if isinstance(refreshed, Err):
        return refreshed
    console.success(f"release {LATEST_MARKER} now tracks {release.name}")
    return Ok(None)
