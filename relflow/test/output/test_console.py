from __future__ import annotations

import pytest

from relflow.output.console import MockConsole, RichConsole, Style


def test_mock_console_records_styles() -> None:
    console = MockConsole()
    console.header("build v3.0.0")
    console.success("tests passed")
    console.error("tag v3.0.0 is not on the remote")
    console.print("git push origin v3.0.0", Style.DIM)

    assert console.messages == [
        "build v3.0.0",
        "OK tests passed",
        "error: tag v3.0.0 is not on the remote",
        "git push origin v3.0.0",
    ]
    assert console.has_error()
    assert len(console.find("v3.0.0")) == 4


def test_rich_console_splits_streams(capsys: pytest.CaptureFixture[str]) -> None:
    console = RichConsole()
    console.success("stamped version 3.0.0")
    console.error("build directory already exists: [releases/v3.0.0]")

    captured = capsys.readouterr()
    assert "OK stamped version 3.0.0" in captured.out
    assert "error:" not in captured.out
    # Markup in messages is printed literally.
    assert "[releases/v3.0.0]" in captured.err


def test_rich_console_warning_goes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    console = RichConsole()
    console.header("publish v3.0.0")
    console.warning("no release record for latest_release right now")

    captured = capsys.readouterr()
    assert captured.out == "\npublish v3.0.0\n"
    assert captured.err == "warning: no release record for latest_release right now\n"
