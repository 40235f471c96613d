"""Build record: proof that a build directory passed every build check.

The build phase writes ``<build_dir>/.relflow/build.json`` as its last step;
draft and publish refuse to use a build directory whose record is missing or
names a different tag, version or commit.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

from relflow.core.config import ReleaseConfig
from relflow.core.result import Err, Ok, Result
from relflow.core.structured import as_str_dict, get_str
from relflow.platform.files import write_json
from relflow.services.release.errors import (
    ArtifactMissing,
    BuildDirectoryMissing,
    BuildNotVerified,
)
from relflow.services.release.model import ReleaseArtifacts, ResolvedRelease

__all__ = [
    "BuildRecord",
    "collect_artifacts",
    "record_path",
    "require_verified_build",
    "write_build_record",
]


@dataclass(frozen=True, slots=True)
class BuildRecord:
    tag: str
    version: str
    commit: str
    verified_at: str

    @classmethod
    def now(cls, release: ResolvedRelease) -> BuildRecord:
        return cls(
            tag=release.name,
            version=release.version,
            commit=release.tag.commit,
            verified_at=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )


def record_path(build_dir: Path) -> Path:
    return build_dir / ".relflow" / "build.json"


def write_build_record(release: ResolvedRelease) -> BuildRecord:
    record = BuildRecord.now(release)
    write_json(record_path(release.build_dir), asdict(record))
    return record


def _load(path: Path) -> BuildRecord | None:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None

    data = as_str_dict(obj)
    if data is None:
        return None

    tag = get_str(data, "tag")
    version = get_str(data, "version")
    commit = get_str(data, "commit")
    if tag is None or version is None or commit is None:
        return None
    return BuildRecord(
        tag=tag,
        version=version,
        commit=commit,
        verified_at=get_str(data, "verified_at") or "",
    )


def require_verified_build(
    release: ResolvedRelease,
) -> Result[BuildRecord, BuildDirectoryMissing | BuildNotVerified]:
    build_dir = release.build_dir
    if not build_dir.is_dir():
        return Err(BuildDirectoryMissing(path=build_dir))

    record = _load(record_path(build_dir))
    if record is None:
        return Err(BuildNotVerified(path=build_dir, reason="build did not complete"))

    expected = (release.name, release.version, release.tag.commit)
    if (record.tag, record.version, record.commit) != expected:
        return Err(
            BuildNotVerified(
                path=build_dir,
                reason=f"built {record.tag} at {record.commit[:12]}, "
                f"HEAD is {release.name} at {release.tag.short_commit}",
            )
        )
    return Ok(record)


def collect_artifacts(
    build_dir: Path,
    config: ReleaseConfig,
) -> Result[ReleaseArtifacts, ArtifactMissing]:
    """The executable and both manifests, all of which must exist."""
    first, second = config.paths.manifests
    artifacts = ReleaseArtifacts(
        executable=build_dir / config.artifact,
        manifests=(build_dir / first, build_dir / second),
    )
    for path in artifacts.all:
        if not path.is_file():
            return Err(ArtifactMissing(path=path))
    return Ok(artifacts)
