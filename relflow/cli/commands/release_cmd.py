"""The three release phases: build, draft, publish."""

from __future__ import annotations

import typer

from relflow.cli.commands._helpers import exit_on_release_error
from relflow.cli.context import build_context


def build() -> None:
    """Check out the release tag into releases/<tag>, build, test and verify it."""
    ctx = build_context()
    outcome = exit_on_release_error(ctx.service.build(), ctx.console)
    ctx.console.success(f"build ready: {outcome.release.build_dir}")
    ctx.console.print("next: relflow draft")


def draft(
    dry_run: bool = typer.Option(False, "--dry-run", help="Run checks, print host changes only"),
) -> None:
    """Create the draft release and upload the build artifacts."""
    ctx = build_context(needs_host=True, dry_run=dry_run)
    exit_on_release_error(ctx.service.draft(), ctx.console)
    ctx.console.print("review the draft, then: relflow publish")


def publish(
    dry_run: bool = typer.Option(False, "--dry-run", help="Run checks, print host changes only"),
) -> None:
    """Publish the draft, push images and update the latest release."""
    ctx = build_context(needs_host=True, dry_run=dry_run)
    exit_on_release_error(ctx.service.publish(), ctx.console)
