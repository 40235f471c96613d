"""Draft phase: create the non-public release record and attach the artifacts.

All checks run before the first host mutation. Once the draft exists there
is no rollback: if an upload fails the operator deletes the draft and re-runs.
"""

from __future__ import annotations

from relflow.core.config import ReleaseConfig
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.services.release.errors import (
    ReleaseAlreadyExists,
    ReleaseError,
    TagNotPushed,
)
from relflow.services.release.model import ReleaseArtifacts, ResolvedRelease
from relflow.services.release.ports import ReleaseHost
from relflow.services.release.state import collect_artifacts, require_verified_build


def release_title(release: ResolvedRelease, config: ReleaseConfig) -> str:
    return f"{config.release.release_name} {release.name}"


def run_draft(
    release: ResolvedRelease,
    *,
    host: ReleaseHost,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[ReleaseArtifacts, ReleaseError]:
    verified = require_verified_build(release)
    if isinstance(verified, Err):
        return verified
    artifacts = collect_artifacts(release.build_dir, config)
    if isinstance(artifacts, Err):
        return artifacts

    pushed = host.tag_exists(release.tag.tag_object)
    if isinstance(pushed, Err):
        return pushed
    if not pushed.value:
        return Err(TagNotPushed(tag=release.name, tag_object=release.tag.tag_object))
    console.success(f"tag {release.name} is on {config.release.slug}")

    exists = host.release_exists(release.name)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        return Err(ReleaseAlreadyExists(tag=release.name))
    console.success(f"no release yet for {release.name}")

    created = host.create_release(
        release.name,
        title=release_title(release, config),
        notes=config.release.release_description,
        draft=True,
        prerelease=release.kind.is_prerelease,
    )
    if isinstance(created, Err):
        return created

    for path in artifacts.value.all:
        uploaded = host.upload_asset(release.name, path)
        if isinstance(uploaded, Err):
            console.warning(f"draft {release.name} exists but is missing assets")
            console.print(
                f"hint: gh release delete {release.name} --repo {config.release.slug} --yes, "
                "then re-run: relflow draft",
                Style.DIM,
            )
            return uploaded

    kind = "pre-release draft" if release.kind.is_prerelease else "draft"
    console.success(f"{kind} {release.name} created with {len(artifacts.value.all)} assets")
    return Ok(artifacts.value)
