from __future__ import annotations

import sys
from pathlib import Path

from relflow.core.result import Err, Ok
from relflow.platform.process import ProcessError, run, run_streaming


def test_run_returns_stdout(tmp_path: Path) -> None:
    result = run([sys.executable, "-c", "print('widget version 3.0.0')"], cwd=tmp_path)
    assert isinstance(result, Ok)
    assert result.value.strip() == "widget version 3.0.0"


def test_run_nonzero_exit(tmp_path: Path) -> None:
    code = "import sys; sys.stderr.write('boom\\n'); sys.exit(3)"
    result = run([sys.executable, "-c", code], cwd=tmp_path)
    assert isinstance(result, Err)
    assert result.error.returncode == 3
    assert result.error.detail == "boom"


def test_run_missing_executable(tmp_path: Path) -> None:
    result = run(["relflow-no-such-binary"], cwd=tmp_path)
    assert isinstance(result, Err)
    assert result.error.returncode == -1


def test_run_timeout(tmp_path: Path) -> None:
    result = run([sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2)
    assert isinstance(result, Err)
    assert "timed out" in result.error.stderr


def test_run_streaming_exit_code(tmp_path: Path) -> None:
    assert isinstance(run_streaming([sys.executable, "-c", "pass"], cwd=tmp_path), Ok)
    failed = run_streaming([sys.executable, "-c", "raise SystemExit(2)"], cwd=tmp_path)
    assert isinstance(failed, Err)
    assert failed.error.returncode == 2


def test_process_error_str_truncates_command() -> None:
    err = ProcessError(command=("gh", "release", "create", "v1.0.0"), returncode=1, stdout="", stderr="")
    assert str(err) == "gh release create ... failed (exit 1)"
    assert err.detail == str(err)
