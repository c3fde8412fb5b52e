"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent CI logs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cci.core.config import ConfigError
from cci.core.errors import ErrorCode
from cci.output.console import Style
from cci.platform.files import FileError
from cci.platform.process import ExecutionError
from cci.services.brew import FormulaError
from cci.services.consistency import UncommittedChangesError
from cci.services.release.errors import BuildError, PackagingError, UnsupportedPlatformError

if TYPE_CHECKING:
    from cci.output.console import ConsoleProtocol

__all__ = ["PipelineError", "pipeline_error_exit_code", "print_pipeline_error"]

PipelineError = (
    ExecutionError
    | UnsupportedPlatformError
    | BuildError
    | PackagingError
    | UncommittedChangesError
    | ConfigError
    | FormulaError
    | FileError
)


def print_pipeline_error(error: PipelineError, console: ConsoleProtocol) -> None:
    """Print ``error`` with a short context line where it helps."""
    match error:
        case ExecutionError(command=command, returncode=rc, message=message):
            console.error(message)
            console.print(f"command: {command} (exit {rc})", Style.DIM)
        case BuildError(message=message, returncode=rc):
            console.error(f"build failed (exit {rc})")
            console.print(message)
        case PackagingError(message=message):
            console.error(f"packaging failed: {message}")
        case UncommittedChangesError():
            console.error(error.message)
            console.print("hint: run the step locally and commit the result", Style.DIM)
        case ConfigError(message=message, path=path):
            console.error(message)
            if path is not None:
                console.print(f"config: {path}", Style.DIM)
        case UnsupportedPlatformError() | FormulaError() | FileError():
            console.error(error.message)


def pipeline_error_exit_code(error: PipelineError) -> int:
    """Exit code for ``error``."""
    match error:
        case UnsupportedPlatformError() | FormulaError():
            return int(ErrorCode.USER_ERROR)
        case ConfigError():
            return int(ErrorCode.ENV_ERROR)
        case BuildError():
            return int(ErrorCode.BUILD_ERROR)
        case PackagingError():
            return int(ErrorCode.PACKAGING_ERROR)
        case UncommittedChangesError():
            return int(ErrorCode.DRIFT_ERROR)
        case FileError():
            return int(ErrorCode.IO_ERROR)
        case ExecutionError():
            return int(ErrorCode.EXEC_ERROR)
    return int(ErrorCode.EXEC_ERROR)
