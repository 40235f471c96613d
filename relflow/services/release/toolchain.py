from __future__ import annotations

from pathlib import Path

from relflow.core.config import BuildSettings
from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.platform.process import run as run_process
from relflow.platform.process import run_streaming
from relflow.services.release.errors import ToolchainFailed
from relflow.services.release.model import ToolchainParams


class MakeToolchain:
    """Build toolchain driven by make targets.

    Parameters travel as ``NAME=value`` make variables; what the targets do
    with them (compiler, container builds, registry pushes) is up to the
    project's Makefile.
    """

    def __init__(
        self,
        *,
        settings: BuildSettings,
        artifact: str,
        console: ConsoleProtocol,
        dry_run: bool = False,
    ) -> None:
        self._settings = settings
        self._artifact = artifact
        self._console = console
        self._dry_run = dry_run

    def build(self, params: ToolchainParams, *, cwd: Path) -> Result[None, ToolchainFailed]:
        cmd = [*self._settings.build_command, *params.as_make_vars()]
        return self._stream("build", cmd, cwd=cwd)

    def test(self, *, cwd: Path) -> Result[None, ToolchainFailed]:
        return self._stream("test", list(self._settings.test_command), cwd=cwd)

    def push_images(self, params: ToolchainParams, *, cwd: Path) -> Result[None, ToolchainFailed]:
        cmd = [*self._settings.push_command, *params.as_make_vars()]
        if self._dry_run:
            self._console.print(" ".join(cmd), Style.DIM)
            return Ok(None)
        return self._stream("push images", cmd, cwd=cwd)

    def self_version(self, *, cwd: Path) -> Result[str, ToolchainFailed]:
        cmd = [str(cwd / self._artifact), *self._settings.version_args]
        self._console.print(f"{self._artifact} {' '.join(self._settings.version_args)}", Style.DIM)
        result = run_process(cmd, cwd=cwd)
        if isinstance(result, Err):
            e = result.error
            return Err(ToolchainFailed(step="version", returncode=e.returncode, message=e.detail))
        return Ok(result.value)

    def _stream(self, step: str, cmd: list[str], *, cwd: Path) -> Result[None, ToolchainFailed]:
        self._console.print(" ".join(cmd), Style.DIM)
        result = run_streaming(cmd, cwd=cwd)
        if isinstance(result, Err):
            e = result.error
            return Err(ToolchainFailed(step=step, returncode=e.returncode, message=e.stderr.strip()))
        return Ok(None)
