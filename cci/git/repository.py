"""Git repository abstraction.

Only the queries the pipeline needs: the release tag and the set of files
that differ from what is committed. All methods return Result types.

Usage:
    repo = Repository(root.path, runner)

    match repo.describe_tags():
        case Ok(tag):
            print(f"Releasing {tag}")
        case Err(e):
            print(f"No tag: {e.message}")
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from cci.core.result import Err, Ok, Result
from cci.platform.process import CommandSpec, ExecutionError, ProcessRunner

__all__ = ["Repository"]


class Repository:
    """Git operations on a single checkout.

    Attributes:
        path: Repository root (the project root).
    """

    def __init__(self, path: Path, runner: ProcessRunner) -> None:
        self.path = path
        self._runner = runner

    def describe_tags(self) -> Result[str, ExecutionError]:
        """``git describe --tags``: nearest tag, plus distance if not on it."""
        result = self._run(["describe", "--tags"])
        match result:
            case Err():
                return result
            case Ok(out):
                return Ok(out.strip())

    def changed_files(self) -> Result[tuple[str, ...], ExecutionError]:
        """Untracked and modified files, gitignored files excluded.

        Paths are root-relative, in git's order, each listed once.
        """
        result = self._run(["ls-files", "-z", "--other", "--modified", "--exclude-standard"])
        match result:
            case Err():
                return result
            case Ok(out):
                return Ok(_unique(p for p in out.split("\0") if p))

    def _run(self, args: list[str]) -> Result[str, ExecutionError]:
        spec = CommandSpec.of("git", "-C", str(self.path), *args, cwd=self.path)
        return self._runner.run(spec).map(lambda r: r.stdout)


def _unique(paths: Iterable[str]) -> tuple[str, ...]:
    # --modified and --other can both report a path (e.g. deleted + re-added).
    seen: dict[str, None] = {}
    for p in paths:
        seen.setdefault(p, None)
    return tuple(seen)
