"""Platform layer: process execution, target platform detection and file helpers."""

from .detection import (
    SUPPORTED_GOOS,
    TargetOS,
    host_goarch,
    host_target_os,
    parse_target_os,
)
from .files import FileError, atomic_write_text
from .process import (
    EXEC_FAILED_MESSAGE,
    CommandResult,
    CommandSpec,
    ExecutionError,
    ProcessRunner,
    StreamMode,
    SubprocessRunner,
    run,
    run_inherited,
    trim_trailing_newline,
)

__all__ = [
    # detection
    "SUPPORTED_GOOS",
    "TargetOS",
    "host_goarch",
    "host_target_os",
    "parse_target_os",
    # files
    "FileError",
    "atomic_write_text",
    # process
    "EXEC_FAILED_MESSAGE",
    "CommandResult",
    "CommandSpec",
    "ExecutionError",
    "ProcessRunner",
    "StreamMode",
    "SubprocessRunner",
    "run",
    "run_inherited",
    "trim_trailing_newline",
]
