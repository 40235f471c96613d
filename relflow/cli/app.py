from __future__ import annotations

import click
import typer

from relflow import __version__
from relflow.cli.commands.release_cmd import build, draft, publish
from relflow.core.errors import ErrorCode


app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
    help="Promote the version tagged at HEAD: build, then draft, then publish.",
)


# Commands
app.command()(build)
app.command()(draft)
app.command()(publish)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help(), err=True)
        raise typer.Exit(code=int(ErrorCode.FAILURE))


def main() -> None:
    # Usage errors exit 1 like every other failure, not click's default 2.
    try:
        code = app(standalone_mode=False)
    except click.UsageError as e:
        e.show()
        raise SystemExit(int(ErrorCode.FAILURE)) from None
    except click.Abort:
        typer.echo("Aborted!", err=True)
        raise SystemExit(int(ErrorCode.FAILURE)) from None
    raise SystemExit(code if isinstance(code, int) else int(ErrorCode.OK))
