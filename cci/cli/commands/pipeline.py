from __future__ import annotations

from cci.cli.commands._helpers import exit_on_error
from cci.cli.context import build_context


def build() -> None:
    """Build and package a release for $GOOS/$GOARCH."""
    ctx = build_context()
    artifact = exit_on_error(ctx.steps().build(), ctx)
    ctx.console.success(str(artifact.path))


def lint() -> None:
    """Run golangci-lint."""
    ctx = build_context()
    exit_on_error(ctx.steps().lint(), ctx)


def test() -> None:
    """Run Go unit tests (integration and SDK packages excluded)."""
    ctx = build_context()
    exit_on_error(ctx.steps().unit_test(), ctx)


def fmt() -> None:
    """Format Go sources; in CI, fail if that changed anything."""
    ctx = build_context()
    exit_on_error(ctx.steps().fmt(), ctx)


def gendocs() -> None:
    """Regenerate command docs; in CI, fail if that changed anything."""
    ctx = build_context()
    exit_on_error(ctx.steps().gendocs(), ctx)


def integration() -> None:
    """Build the integration image and run integration tests."""
    ctx = build_context()
    exit_on_error(ctx.steps().integration(), ctx)
