from __future__ import annotations

import typer

from cci.cli.commands._helpers import exit_on_error
from cci.cli.context import build_context
from cci.services.brew import write_formula
from cci.services.docs import aggregate_docs


def update_brew(
    version: str = typer.Argument(..., help="Release tag, e.g. v1.14.2"),
    sha256: str = typer.Argument(..., help="SHA-256 of the darwin-amd64 artifact"),
) -> None:
    """Regenerate the Homebrew formula for a release."""
    ctx = build_context()
    path = exit_on_error(
        write_formula(
            ctx.root.join(ctx.config.brew.formula_path),
            version,
            sha256,
            release=ctx.config.release,
            brew=ctx.config.brew,
        ),
        ctx,
    )
    ctx.console.success(str(path))


def aggregate_docs_cmd() -> None:
    """Join the generated docs into a single markdown file."""
    ctx = build_context()
    path = exit_on_error(
        aggregate_docs(ctx.root.join(ctx.config.docs.dir), ctx.config.docs.aggregate_name),
        ctx,
    )
    ctx.console.success(str(path))
