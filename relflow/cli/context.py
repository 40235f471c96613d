from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relflow.core.config import CONFIG_FILENAME, ReleaseConfig, load_config
from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.git.repository import Repository, find_repo_root
from relflow.output.console import ConsoleProtocol, RichConsole
from relflow.services.release.gh import GhReleaseHost, ensure_gh_available
from relflow.services.release.service import ReleaseService
from relflow.services.release.toolchain import MakeToolchain


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    config: ReleaseConfig
    console: ConsoleProtocol
    service: ReleaseService


def build_context(*, needs_host: bool = False, dry_run: bool = False) -> CLIContext:
    console = RichConsole()

    root = find_repo_root(Path.cwd())
    if isinstance(root, Err):
        console.error(f"not inside a git repository: {root.error.message}")
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    repo_root = root.value

    config_result = load_config(repo_root)
    if isinstance(config_result, Err):
        console.error(f"{CONFIG_FILENAME}: {config_result.error.message}")
        raise typer.Exit(code=int(ErrorCode.FAILURE))
    config = config_result.value

    if needs_host:
        gh = ensure_gh_available()
        if isinstance(gh, Err):
            console.error(gh.error.message)
            raise typer.Exit(code=int(ErrorCode.FAILURE))

    service = ReleaseService(
        repo_root=repo_root,
        config=config,
        vcs=Repository(repo_root),
        toolchain=MakeToolchain(
            settings=config.build,
            artifact=config.artifact,
            console=console,
            dry_run=dry_run,
        ),
        host=GhReleaseHost(
            repo_root=repo_root,
            slug=config.release.slug,
            console=console,
            dry_run=dry_run,
        ),
        console=console,
    )
    return CLIContext(repo_root=repo_root, config=config, console=console, service=service)
