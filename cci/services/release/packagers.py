"""Per-platform packaging of a built binary.

Each packager works inside the release workspace (its commands get the
workspace as ``cwd``) and leaves the finished archive there:

- Windows: ``coder`` -> ``coder.exe``, then ``zip``.
- Linux: ``tar -czf``.
- macOS: ``gon`` signs and notarizes as described by ``gon.json`` and writes
  ``coder.zip``, which is renamed to the artifact name.

Tool commands run in captured mode so a failure carries the tool's own
error text into ``PackagingError``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Protocol

from cci.core.result import Err, Ok, Result
from cci.output.console import ConsoleProtocol
from cci.platform.detection import TargetOS
from cci.platform.process import CommandSpec, ProcessRunner

from .errors import PackagingError
from .model import ReleaseContext

__all__ = [
    "DESCRIPTOR_NAME",
    "LinuxPackager",
    "MacOSPackager",
    "Packager",
    "WindowsPackager",
    "packager_for",
]

# Name of the packaging descriptor inside the workspace; gon reads it.
DESCRIPTOR_NAME = "gon.json"


class Packager(Protocol):
    target: TargetOS

    def package(self, ctx: ReleaseContext, artifact: str) -> Result[Path, PackagingError]:
        """Turn the binary in ``ctx.workspace`` into ``artifact``.

        Returns the archive path inside the workspace.
        """
        ...


class _ToolPackager(ABC):
    """Shared plumbing for packagers that shell out to an archiving tool."""

    target: TargetOS

    def __init__(
        self,
        *,
        binary_name: str,
        runner: ProcessRunner,
        console: ConsoleProtocol,
    ) -> None:
        self._binary_name = binary_name
        self._runner = runner
        self._console = console

    @abstractmethod
    def package(self, ctx: ReleaseContext, artifact: str) -> Result[Path, PackagingError]:
        ...

    def _tool(self, ctx: ReleaseContext, *argv: str) -> Result[None, PackagingError]:
        spec = CommandSpec.of(*argv, cwd=ctx.workspace)
        self._console.command(spec.display())
        result = self._runner.run(spec)
        if isinstance(result, Err):
            e = result.error
            return Err(PackagingError(message=e.message, returncode=e.returncode))
        return Ok(None)

    def _rename(self, src: Path, dst: Path) -> Result[Path, PackagingError]:
        try:
            src.rename(dst)
        except OSError as e:
            return Err(PackagingError(message=f"rename {src.name} -> {dst.name}: {e}"))
        return Ok(dst)

    def _expect(self, path: Path, producer: str) -> Result[Path, PackagingError]:
        if not path.is_file():
            return Err(PackagingError(message=f"{producer} did not produce {path.name}"))
        return Ok(path)


class WindowsPackager(_ToolPackager):
    target = TargetOS.WINDOWS

    def package(self, ctx: ReleaseContext, artifact: str) -> Result[Path, PackagingError]:
        exe_name = self.target.exe_name(self._binary_name)
        renamed = self._rename(ctx.workspace / self._binary_name, ctx.workspace / exe_name)
        if isinstance(renamed, Err):
            return renamed

        zipped = self._tool(ctx, "zip", artifact, exe_name)
        if isinstance(zipped, Err):
            return zipped
        return self._expect(ctx.workspace / artifact, "zip")


class LinuxPackager(_ToolPackager):
    target = TargetOS.LINUX

    def package(self, ctx: ReleaseContext, artifact: str) -> Result[Path, PackagingError]:
        archived = self._tool(ctx, "tar", "-czf", artifact, self._binary_name)
        if isinstance(archived, Err):
            return archived
        return self._expect(ctx.workspace / artifact, "tar")


class MacOSPackager(_ToolPackager):
    target = TargetOS.MACOS

    def package(self, ctx: ReleaseContext, artifact: str) -> Result[Path, PackagingError]:
        signed = self._tool(ctx, "gon", "-log-level", "debug", f"./{DESCRIPTOR_NAME}")
        if isinstance(signed, Err):
            return signed

        # gon.json names its zip output after the binary.
        output = self._expect(ctx.workspace / f"{self._binary_name}.zip", "gon")
        if isinstance(output, Err):
            return output
        return self._rename(output.value, ctx.workspace / artifact)


_PACKAGERS: dict[TargetOS, type[_ToolPackager]] = {
    TargetOS.WINDOWS: WindowsPackager,
    TargetOS.LINUX: LinuxPackager,
    TargetOS.MACOS: MacOSPackager,
}


def packager_for(
    target: TargetOS,
    *,
    binary_name: str,
    runner: ProcessRunner,
    console: ConsoleProtocol,
) -> Packager:
    """Packager for ``target``; every ``TargetOS`` member has one."""
    cls = _PACKAGERS[target]
    return cls(binary_name=binary_name, runner=runner, console=console)
