from __future__ import annotations

from dataclasses import dataclass

from cci.platform.detection import SUPPORTED_GOOS


@dataclass(frozen=True, slots=True)
class UnsupportedPlatformError:
    goos: str

    @property
    def message(self) -> str:
        return f"unknown GOOS: {self.goos!r} (supported: {', '.join(SUPPORTED_GOOS)})"


@dataclass(frozen=True, slots=True)
class BuildError:
    """The compiler exited non-zero; ``message`` is its error text."""

    message: str
    returncode: int


@dataclass(frozen=True, slots=True)
class PackagingError:
    """An archiver or signing tool failed; ``message`` is its error text."""

    message: str
    returncode: int | None = None


ReleaseError = UnsupportedPlatformError | BuildError | PackagingError
