"""Target platform model and host detection.

Release builds are addressed with Go's own OS/architecture names (``GOOS``,
``GOARCH``) since those end up verbatim in artifact file names. The set of
operating systems we can package for is closed: ``TargetOS`` is the only
way to name one, and parsing happens once at pipeline entry.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from enum import Enum
from functools import lru_cache

__all__ = [
    "SUPPORTED_GOOS",
    "TargetOS",
    "host_goarch",
    "host_target_os",
    "parse_target_os",
]


class TargetOS(Enum):
    """Operating systems a release can be packaged for.

    Values are the ``GOOS`` tags.
    """

    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "darwin"

    def __str__(self) -> str:
        return self.value

    @property
    def goos(self) -> str:
        return self.value

    @property
    def archive_ext(self) -> str:
        """Extension of the release archive for this OS."""
        return "tar.gz" if self == TargetOS.LINUX else "zip"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self == TargetOS.WINDOWS else ""

    def exe_name(self, name: str) -> str:
        """Executable file name, e.g. ``coder.exe`` on Windows."""
        return f"{name}{self.exe_suffix}"


SUPPORTED_GOOS: tuple[str, ...] = tuple(t.value for t in TargetOS)


def parse_target_os(value: str) -> TargetOS | None:
    """Map a ``GOOS`` tag to ``TargetOS``; None if unsupported.

    Matching is exact: Go tags are lowercase and so are ours.
    """
    try:
        return TargetOS(value)
    except ValueError:
        return None


@lru_cache(maxsize=1)
def host_target_os() -> TargetOS | None:
    """The OS we are running on, if it is a packaging target (cached)."""
    # NOTE: sys.platform rather than platform.system(); the latter may query
    # WMI on Windows.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return TargetOS.LINUX
    if system.startswith("darwin"):
        return TargetOS.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return TargetOS.WINDOWS
    return None


@lru_cache(maxsize=1)
def host_goarch() -> str:
    """Host CPU architecture in ``GOARCH`` spelling (cached)."""
    if host_target_os() == TargetOS.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        ).lower()
    else:
        machine = _platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "amd64"
    if machine in ("aarch64", "arm64"):
        return "arm64"
    if machine in ("i386", "i686", "x86"):
        return "386"
    return machine
