"""Failure kinds of the release workflow.

Every precondition that can stop a phase has its own frozen dataclass;
``ReleaseError`` is their union. Presentation (message + remediation hint)
lives in ``relflow.output.errors``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# -----------------------------------------------------------------------------
# Tag resolution
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AmbiguousVersion:
    """HEAD carries several release tags, or only the floating marker."""

    candidates: tuple[str, ...]
    only_marker: bool = False


@dataclass(frozen=True, slots=True)
class NoVersionTag:
    commit: str = "HEAD"


# -----------------------------------------------------------------------------
# Build phase
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StaleBuildDirectory:
    path: Path


@dataclass(frozen=True, slots=True)
class ChangelogMismatch:
    path: Path
    expected: str
    found: str | None


@dataclass(frozen=True, slots=True)
class StampFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class TestsFailed:
    __test__ = False  # not a pytest test class

    returncode: int


@dataclass(frozen=True, slots=True)
class VersionMismatch:
    expected: str
    reported: str | None


# -----------------------------------------------------------------------------
# Draft / publish phases
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BuildDirectoryMissing:
    path: Path


@dataclass(frozen=True, slots=True)
class BuildNotVerified:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ArtifactMissing:
    path: Path


@dataclass(frozen=True, slots=True)
class TagNotPushed:
    tag: str
    tag_object: str


@dataclass(frozen=True, slots=True)
class ReleaseAlreadyExists:
    tag: str


@dataclass(frozen=True, slots=True)
class ReleaseMissing:
    tag: str


@dataclass(frozen=True, slots=True)
class LatestMarkerStale:
    tag: str
    tag_commit: str
    marker: str
    marker_commit: str | None


@dataclass(frozen=True, slots=True)
class MarkerNotPushed:
    marker: str
    tag_object: str


@dataclass(frozen=True, slots=True)
class MarkerNotAnnotated:
    """The marker is a lightweight tag; the host only knows tag objects."""

    marker: str
    tag: str


# -----------------------------------------------------------------------------
# Collaborator failures
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GitFailed:
    command: str
    message: str


@dataclass(frozen=True, slots=True)
class HostFailed:
    operation: str
    message: str


@dataclass(frozen=True, slots=True)
class ToolchainFailed:
    step: str
    returncode: int
    message: str = ""


ReleaseError = (
    AmbiguousVersion
    | NoVersionTag
    | StaleBuildDirectory
    | ChangelogMismatch
    | StampFailed
    | TestsFailed
    | VersionMismatch
    | BuildDirectoryMissing
    | BuildNotVerified
    | ArtifactMissing
    | TagNotPushed
    | ReleaseAlreadyExists
    | ReleaseMissing
    | LatestMarkerStale
    | MarkerNotPushed
    | MarkerNotAnnotated
    | GitFailed
    | HostFailed
    | ToolchainFailed
)
