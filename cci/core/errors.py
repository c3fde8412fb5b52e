"""Exit codes for pipeline commands.

A CI runner only distinguishes zero from non-zero, but distinct codes make
a failed stage easier to triage from the job log alone.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable; do not renumber.

    - 0: Success
    - 1: User error (unsupported target platform, bad arguments)
    - 2: Environment error (not inside a repository, invalid config)
    - 3: Build error (compiler failed)
    - 4: Packaging error (archiver or signing tool failed)
    - 5: Drift error (regenerated files differ from version control)
    - 6: Execution error (any other external command failed)
    - 7: I/O error (file could not be read or written)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    PACKAGING_ERROR = 4
    DRIFT_ERROR = 5
    EXEC_ERROR = 6
    IO_ERROR = 7

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
