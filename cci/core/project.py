"""Project root detection.

The project root is the top of the git checkout that contains the Go module
being released. It is resolved once per command and handed to every step as
an explicit value: steps pass it as the ``cwd`` of the commands they run and
join relative paths onto it. Nothing here changes the process working
directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cci.core.config import CONFIG_RELATIVE_PATH
from cci.core.result import Err, Ok, Result
from cci.platform.process import CommandSpec, ExecutionError, ProcessRunner

__all__ = ["ProjectRoot", "resolve_project_root"]


@dataclass(frozen=True, slots=True)
class ProjectRoot:
    """Resolved project root.

    Attributes:
        path: Absolute path of the repository toplevel.
    """

    path: Path

    @property
    def config_path(self) -> Path:
        """Path to the optional ci/cci.toml."""
        return self.path / CONFIG_RELATIVE_PATH

    def join(self, relative: str | Path) -> Path:
        """Root-relative path to absolute path."""
        return self.path / relative


def resolve_project_root(
    runner: ProcessRunner,
    cwd: Path | None = None,
) -> Result[ProjectRoot, ExecutionError]:
    """Ask git for the repository toplevel.

    Args:
        runner: Process runner used for the git query.
        cwd: Directory to start from (defaults to the current directory).

    Returns:
        Ok(ProjectRoot) on success, Err(ExecutionError) when git fails, e.g.
        outside a repository.
    """
    result = runner.run(CommandSpec.of("git", "rev-parse", "--show-toplevel", cwd=cwd))
    if isinstance(result, Err):
        return result

    toplevel = result.value.stdout.strip()
    if not toplevel:
        return Err(
            ExecutionError(
                command="git rev-parse --show-toplevel",
                returncode=0,
                message="git did not report a repository toplevel",
            )
        )
    return Ok(ProjectRoot(path=Path(toplevel).resolve()))
