"""Error presentation for the release workflow.

One ``error:`` line saying what is wrong, then a dimmed ``hint:`` with the
command that fixes it. The exit code is the same for every kind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relflow.core.errors import ErrorCode
from relflow.output.console import Style
from relflow.services.release.errors import (
    AmbiguousVersion,
    ArtifactMissing,
    BuildDirectoryMissing,
    BuildNotVerified,
    ChangelogMismatch,
    GitFailed,
    HostFailed,
    LatestMarkerStale,
    MarkerNotAnnotated,
    MarkerNotPushed,
    NoVersionTag,
    ReleaseAlreadyExists,
    ReleaseError,
    ReleaseMissing,
    StaleBuildDirectory,
    StampFailed,
    TagNotPushed,
    TestsFailed,
    ToolchainFailed,
    VersionMismatch,
)

if TYPE_CHECKING:
    from relflow.output.console import ConsoleProtocol

__all__ = ["describe_release_error", "print_release_error", "release_error_exit_code"]


def describe_release_error(error: ReleaseError) -> tuple[str, str | None]:
    """Return (message, hint) for a release error."""
    match error:
        case AmbiguousVersion(only_marker=True):
            return (
                "no release tag at HEAD, only the floating marker latest_release",
                "tag the release: git tag -a vX.Y.Z -m vX.Y.Z",
            )
        case AmbiguousVersion(candidates=candidates):
            return (
                f"several release tags at HEAD: {', '.join(candidates)}",
                "delete all but one: git tag -d <tag>",
            )
        case NoVersionTag(commit=commit):
            return (
                f"no annotated tag at {commit}",
                "tag the release: git tag -a vX.Y.Z -m vX.Y.Z",
            )
        case StaleBuildDirectory(path=path):
            return (f"build directory already exists: {path}", f"rm -rf {path}")
        case ChangelogMismatch(path=path, expected=expected, found=None):
            return (
                f"no release entry found in {path.name}, expected {expected}",
                f"add a '## Release {expected}' entry, commit and re-tag",
            )
        case ChangelogMismatch(path=path, expected=expected, found=found):
            return (
                f"latest {path.name} entry is {found}, expected {expected}",
                "was the tag cut on the right commit?",
            )
        case StampFailed(path=path, reason=reason):
            return (f"cannot stamp version into {path}: {reason}", None)
        case TestsFailed(returncode=rc):
            return (f"tests failed (exit {rc})", "fix the tests, remove the build directory, rebuild")
        case VersionMismatch(expected=expected, reported=reported):
            return (
                f"built executable reports version {reported or '(nothing)'}, expected {expected}",
                "check the version stamp pattern in relflow.toml",
            )
        case BuildDirectoryMissing(path=path):
            return (f"build directory not found: {path}", "run: relflow build")
        case BuildNotVerified(path=path, reason=reason):
            return (
                f"build in {path} is not verified ({reason})",
                f"rm -rf {path} && relflow build",
            )
        case ArtifactMissing(path=path):
            return (f"artifact not found: {path}", None)
        case TagNotPushed(tag=tag):
            return (f"tag {tag} is not on the remote", f"git push origin {tag}")
        case ReleaseAlreadyExists(tag=tag):
            return (f"a release already exists for {tag}", None)
        case ReleaseMissing(tag=tag):
            return (f"no draft release for {tag}", "run: relflow draft")
        case LatestMarkerStale(tag=tag, marker=marker, marker_commit=None):
            return (
                f"tag {marker} does not exist",
                f"git tag -f -a {marker} -m {marker} {tag}^{{}} && "
                f"git push -f origin {marker}",
            )
        case LatestMarkerStale(tag=tag, tag_commit=tag_commit, marker=marker, marker_commit=mc):
            return (
                f"{marker} is at {mc}, {tag} is at {tag_commit}",
                f"git tag -f -a {marker} -m {marker} {tag}^{{}} && "
                f"git push -f origin {marker}",
            )
        case MarkerNotPushed(marker=marker):
            return (f"tag {marker} is not on the remote", f"git push -f origin {marker}")
        case MarkerNotAnnotated(marker=marker, tag=tag):
            return (
                f"tag {marker} is a lightweight tag",
                f"git tag -f -a {marker} -m {marker} {tag}^{{}} && "
                f"git push -f origin {marker}",
            )
        case GitFailed(command=command, message=message):
            return (f"git {command} failed: {message}", None)
        case HostFailed(operation=operation, message=message):
            return (f"{operation} failed: {message}", None)
        case ToolchainFailed(step=step, returncode=rc, message=message):
            detail = f": {message}" if message else ""
            return (f"{step} failed (exit {rc}){detail}", None)
    # Fallback for exhaustiveness
    return (str(error), None)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    message, hint = describe_release_error(error)
    console.error(message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    del error
    return int(ErrorCode.FAILURE)
