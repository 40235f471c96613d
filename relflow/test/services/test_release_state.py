from __future__ import annotations

import json
from pathlib import Path

from relflow.core.result import Err, Ok
from relflow.services.release.errors import ArtifactMissing, BuildDirectoryMissing, BuildNotVerified
from relflow.services.release.model import ReleaseKind, ReleaseTag, ResolvedRelease
from relflow.services.release.state import (
    collect_artifacts,
    record_path,
    require_verified_build,
    write_build_record,
)
from relflow.test.services.release_fakes import COMMIT, TAG_OBJECT, make_config


def _release(tmp_path: Path, *, commit: str = COMMIT) -> ResolvedRelease:
    return ResolvedRelease(
        tag=ReleaseTag(name="v3.0.0", commit=commit, tag_object=TAG_OBJECT),
        kind=ReleaseKind.MAINLINE,
        version="3.0.0",
        build_dir=tmp_path / "releases" / "v3.0.0",
    )


def test_missing_build_dir(tmp_path: Path) -> None:
    release = _release(tmp_path)
    assert require_verified_build(release) == Err(BuildDirectoryMissing(path=release.build_dir))


def test_build_dir_without_record(tmp_path: Path) -> None:
    release = _release(tmp_path)
    release.build_dir.mkdir(parents=True)
    result = require_verified_build(release)
    assert isinstance(result, Err)
    assert isinstance(result.error, BuildNotVerified)


def test_record_round_trip(tmp_path: Path) -> None:
    release = _release(tmp_path)
    release.build_dir.mkdir(parents=True)
    written = write_build_record(release)

    data = json.loads(record_path(release.build_dir).read_text(encoding="utf-8"))
    assert data["tag"] == "v3.0.0"
    assert data["commit"] == COMMIT
    assert require_verified_build(release) == Ok(written)


def test_record_for_other_commit_is_rejected(tmp_path: Path) -> None:
    release = _release(tmp_path)
    release.build_dir.mkdir(parents=True)
    write_build_record(release)

    moved = _release(tmp_path, commit="0" * 40)
    result = require_verified_build(moved)
    assert isinstance(result, Err)
    assert isinstance(result.error, BuildNotVerified)
    assert "HEAD is v3.0.0 at 000000000000" in result.error.reason


def test_corrupt_record(tmp_path: Path) -> None:
    release = _release(tmp_path)
    path = record_path(release.build_dir)
    path.parent.mkdir(parents=True)
    path.write_text("{not json", encoding="utf-8")
    assert isinstance(require_verified_build(release), Err)


def test_collect_artifacts(tmp_path: Path) -> None:
    config = make_config()
    build_dir = tmp_path / "v3.0.0"
    for rel in ("bin/widget", *config.paths.manifests):
        (build_dir / rel).parent.mkdir(parents=True, exist_ok=True)
        (build_dir / rel).write_text("x", encoding="utf-8")

    result = collect_artifacts(build_dir, config)
    assert isinstance(result, Ok)
    assert result.value.executable == build_dir / "bin" / "widget"
    assert [p.name for p in result.value.all] == ["widget", "kubernetes.yaml", "docker-compose.yaml"]


def test_collect_artifacts_missing_executable(tmp_path: Path) -> None:
    config = make_config()
    result = collect_artifacts(tmp_path, config)
    assert result == Err(ArtifactMissing(path=tmp_path / "bin" / "widget"))
