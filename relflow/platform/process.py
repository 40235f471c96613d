"""Running git, gh and the build toolchain.

``run`` captures output for commands whose stdout is parsed (tag queries,
``gh api``, the built executable's version). ``run_streaming`` leaves the
terminal to the child, for ``make`` targets the operator watches. Neither
raises: a command that cannot start or exits non-zero is an ``Err``.

Usage:
    match run(["git", "tag", "--points-at", "HEAD"], cwd=repo_root):
        case Ok(stdout):
            tags = stdout.split()
        case Err(error):
            print(error.detail)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_streaming"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started or exited non-zero.

    ``returncode`` is -1 when the process never completed (missing binary,
    timeout). ``stdout``/``stderr`` are empty for streamed commands.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"

    @property
    def detail(self) -> str:
        """Last line of the command's own complaint, or ``str(self)``."""
        text = self.stderr.strip() or self.stdout.strip()
        if not text:
            return str(self)
        return text.splitlines()[-1]


def _execute(
    cmd: list[str],
    *,
    cwd: Path,
    env: dict[str, str] | None,
    capture: bool,
    timeout: float | None,
) -> Result[subprocess.CompletedProcess[str], ProcessError]:
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(ProcessError(command, -1, stderr=f"Command timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, -1, stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command,
                proc.returncode,
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
            )
        )
    return Ok(proc)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    Args:
        cmd: Command and arguments.
        cwd: Working directory.
        env: Full environment for the child (inherits ours if None).
        timeout: Seconds before the child is killed (None waits forever).
    """
    result = _execute(cmd, cwd=cwd, env=env, capture=True, timeout=timeout)
    if isinstance(result, Err):
        return result
    return Ok(result.value.stdout)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run ``cmd`` with its output going straight to the terminal; no timeout."""
    result = _execute(cmd, cwd=cwd, env=env, capture=False, timeout=None)
    if isinstance(result, Err):
        return result
    return Ok(None)
