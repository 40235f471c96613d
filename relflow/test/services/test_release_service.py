from __future__ import annotations

from pathlib import Path

from relflow.core.result import Err, Ok
from relflow.output.console import MockConsole, Style
from relflow.services.release.errors import AmbiguousVersion, NoVersionTag
from relflow.services.release.model import LATEST_MARKER
from relflow.services.release.service import ReleaseService
from relflow.test.services.release_fakes import (
    MARKER_OBJECT,
    TAG_OBJECT,
    FakeHost,
    FakeToolchain,
    FakeVcs,
    make_config,
    project_files,
)


def _service(tmp_path: Path, vcs: FakeVcs, host: FakeHost, console: MockConsole) -> ReleaseService:
    return ReleaseService(
        repo_root=tmp_path,
        config=make_config(),
        vcs=vcs,
        toolchain=FakeToolchain(),
        host=host,
        console=console,
    )


def test_full_release_of_mainline_tag(tmp_path: Path) -> None:
    vcs = FakeVcs(project_files("3.0.0")).tag("v3.0.0").tag(LATEST_MARKER, tag_object=MARKER_OBJECT)
    host = FakeHost(pushed=(TAG_OBJECT, MARKER_OBJECT))
    console = MockConsole()
    service = _service(tmp_path, vcs, host, console)

    built = service.build()
    assert isinstance(built, Ok)
    assert built.value.release.build_dir == tmp_path / "releases" / "v3.0.0"
    assert built.value.record.version == "3.0.0"

    assert isinstance(service.draft(), Ok)
    assert isinstance(service.publish(), Ok)
    assert host.releases["v3.0.0"].draft is False
    assert LATEST_MARKER in host.releases

    headers = [o.message for o in console.outputs if o.style == Style.HEADER]
    assert headers == [
        "build v3.0.0 (mainline, version 3.0.0)",
        "draft v3.0.0 (mainline, version 3.0.0)",
        "publish v3.0.0 (mainline, version 3.0.0)",
    ]


def test_every_phase_resolves_again(tmp_path: Path) -> None:
    vcs = FakeVcs(project_files("3.0.0")).tag("v3.0.0")
    host = FakeHost()
    service = _service(tmp_path, vcs, host, MockConsole())
    assert isinstance(service.build(), Ok)

    vcs.tag("v3.0.1")
    result = service.draft()
    assert result == Err(AmbiguousVersion(candidates=("v3.0.0", "v3.0.1")))
    assert host.calls == []


def test_untagged_head(tmp_path: Path) -> None:
    console = MockConsole()
    service = _service(tmp_path, FakeVcs(), FakeHost(), console)
    assert service.build() == Err(NoVersionTag())
    assert console.outputs == []
