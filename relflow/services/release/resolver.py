"""Tag resolution: which version is HEAD releasing?

The answer is recomputed on every phase entry so that tag changes between
``build``, ``draft`` and ``publish`` are always seen.
"""

from __future__ import annotations

from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.services.release.classify import classify, normalize_version
from relflow.services.release.errors import (
    AmbiguousVersion,
    GitFailed,
    NoVersionTag,
    ReleaseError,
)
from relflow.services.release.model import (
    LATEST_MARKER,
    ReleaseTag,
    ResolvedRelease,
)
from relflow.services.release.ports import VersionControl


def pick_release_tag(tags: tuple[str, ...]) -> Result[str, ReleaseError]:
    """Choose the single release tag among the annotated tags at HEAD.

    The floating marker may share HEAD with the release tag; it is never a
    candidate itself.
    """
    if not tags:
        return Err(NoVersionTag())

    candidates = tuple(sorted(t for t in tags if t != LATEST_MARKER))
    if not candidates:
        return Err(AmbiguousVersion(candidates=(), only_marker=True))
    if len(candidates) > 1:
        return Err(AmbiguousVersion(candidates=candidates))
    return Ok(candidates[0])


def resolve_tag(vcs: VersionControl, rev: str = "HEAD") -> Result[ReleaseTag, ReleaseError]:
    tags = vcs.tags_at(rev)
    if isinstance(tags, Err):
        return Err(GitFailed(command=tags.error.command, message=tags.error.message))

    picked = pick_release_tag(tags.value)
    if isinstance(picked, Err):
        return picked
    name = picked.value

    commit = vcs.commit_of(name)
    if isinstance(commit, Err):
        return Err(GitFailed(command=commit.error.command, message=commit.error.message))
    tag_object = vcs.tag_object_of(name)
    if isinstance(tag_object, Err):
        return Err(GitFailed(command=tag_object.error.command, message=tag_object.error.message))
    if commit.value is None or tag_object.value is None:
        return Err(GitFailed(command="rev-parse", message=f"tag vanished while resolving: {name}"))

    return Ok(ReleaseTag(name=name, commit=commit.value, tag_object=tag_object.value))


def resolve_release(
    vcs: VersionControl,
    *,
    repo_root: Path,
    releases_dir: str,
) -> Result[ResolvedRelease, ReleaseError]:
    """Resolve HEAD's release tag and derive kind, version and build directory."""
    tag = resolve_tag(vcs)
    if isinstance(tag, Err):
        return tag

    kind = classify(tag.value.name)
    return Ok(
        ResolvedRelease(
            tag=tag.value,
            kind=kind,
            version=normalize_version(tag.value.name, kind),
            build_dir=repo_root / releases_dir / tag.value.name,
        )
    )
