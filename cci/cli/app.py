from __future__ import annotations

import typer

from cci import __version__
from cci.cli.commands.pipeline import build, fmt, gendocs, integration, lint, test
from cci.cli.commands.publish import aggregate_docs_cmd, update_brew

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="coder-cli CI pipeline.",
)


# Pipeline steps
app.command()(build)
app.command()(lint)
app.command()(test)
app.command()(fmt)
app.command()(gendocs)
app.command()(integration)

# Publishing helpers
app.command("update-brew")(update_brew)
app.command("aggregate-docs")(aggregate_docs_cmd)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def main() -> None:
    app()
