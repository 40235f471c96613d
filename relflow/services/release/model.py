from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

# Floating tag that follows the most recent published non-prerelease version.
LATEST_MARKER = "latest_release"


class ReleaseKind(StrEnum):
    MAINLINE = "mainline"  # vX.Y.0
    BRANCH = "branch"  # vX.Y.Z, Z != 0
    PRERELEASE = "prerelease"  # anything else

    @property
    def is_prerelease(self) -> bool:
        return self is ReleaseKind.PRERELEASE

    @property
    def updates_latest(self) -> bool:
        """True if publishing this kind moves the floating "latest" pointers."""
        return self is not ReleaseKind.PRERELEASE

    @property
    def publishes_version_db(self) -> bool:
        return self is ReleaseKind.MAINLINE


@dataclass(frozen=True, slots=True)
class ReleaseTag:
    """An annotated tag; the tag object and the commit it names are distinct ids."""

    name: str
    commit: str
    tag_object: str

    @property
    def short_commit(self) -> str:
        return self.commit[:12]


@dataclass(frozen=True, slots=True)
class ResolvedRelease:
    """Everything a phase needs to know about the version being promoted.

    Built fresh by ``resolve_release`` on every phase entry, never cached.
    """

    tag: ReleaseTag
    kind: ReleaseKind
    version: str
    build_dir: Path

    @property
    def name(self) -> str:
        return self.tag.name


@dataclass(frozen=True, slots=True)
class ToolchainParams:
    """Parameters handed through to the build toolchain, not interpreted here."""

    version: str
    sudo: str
    registry_user: str
    update_latest: bool = False
    publish_version_db: bool = False

    def as_make_vars(self) -> list[str]:
        return [
            f"VERSION={self.version}",
            f"SUDO={self.sudo}",
            f"DOCKER_USER={self.registry_user}",
            f"UPDATE_LATEST={_flag(self.update_latest)}",
            f"PUBLISH_DB={_flag(self.publish_version_db)}",
        ]


@dataclass(frozen=True, slots=True)
class ReleaseArtifacts:
    """The three files attached to every release record."""

    executable: Path
    manifests: tuple[Path, Path]

    @property
    def all(self) -> tuple[Path, ...]:
        return (self.executable, *self.manifests)


def _flag(value: bool) -> str:
    return "true" if value else "false"
