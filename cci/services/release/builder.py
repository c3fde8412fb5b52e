"""Release build orchestration.

``ReleaseBuilder.build_release`` turns a (GOOS, GOARCH, tag) triple into a
release archive under ``dist/``:

1. Validate the target OS. Unsupported values fail before any work.
2. Create a temporary workspace owned by this call.
3. ``go build`` the tool into the workspace with the tag embedded.
4. Copy the packaging descriptor (``ci/gon.json``) into the workspace.
5. Run the platform packager with the workspace as working directory.
6. Move the archive to the output directory.

The workspace is removed on every exit path, including failures.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from cci.core.config import ReleaseConfig
from cci.core.project import ProjectRoot
from cci.core.result import Err, Ok, Result
from cci.output.console import ConsoleProtocol
from cci.platform.detection import TargetOS, parse_target_os
from cci.platform.process import CommandSpec, ProcessRunner

from .errors import BuildError, PackagingError, ReleaseError, UnsupportedPlatformError
from .model import Artifact, ReleaseContext, artifact_name
from .packagers import DESCRIPTOR_NAME, Packager, packager_for

__all__ = ["WORKSPACE_PREFIX", "ReleaseBuilder"]

WORKSPACE_PREFIX = "cci-release-"


class ReleaseBuilder:
    """Build and package one release artifact per call."""

    def __init__(
        self,
        *,
        root: ProjectRoot,
        config: ReleaseConfig,
        runner: ProcessRunner,
        console: ConsoleProtocol,
    ) -> None:
        self._root = root
        self._config = config
        self._runner = runner
        self._console = console

    @property
    def dist_dir(self) -> Path:
        return self._root.join(self._config.dist_dir)

    def build_release(
        self,
        target_os: TargetOS | str,
        target_arch: str,
        version_tag: str,
    ) -> Result[Artifact, ReleaseError]:
        """Compile, package and publish one artifact.

        Args:
            target_os: ``TargetOS`` or a GOOS tag (windows, linux, darwin).
            target_arch: GOARCH value, copied into the artifact name.
            version_tag: Release tag, e.g. ``v1.14.2``.

        Returns:
            Ok(Artifact) pointing into the output directory, or
            Err(UnsupportedPlatformError | BuildError | PackagingError).
        """
        target = target_os if isinstance(target_os, TargetOS) else parse_target_os(target_os)
        if target is None:
            return Err(UnsupportedPlatformError(goos=str(target_os)))

        packager = packager_for(
            target,
            binary_name=self._config.binary_name,
            runner=self._runner,
            console=self._console,
        )

        with tempfile.TemporaryDirectory(prefix=WORKSPACE_PREFIX) as tmp:
            ctx = ReleaseContext(
                target_os=target,
                target_arch=target_arch,
                version_tag=version_tag,
                workspace=Path(tmp),
            )
            return self._build_in_workspace(ctx, packager)

    def _build_in_workspace(
        self, ctx: ReleaseContext, packager: Packager
    ) -> Result[Artifact, ReleaseError]:
        compiled = self._compile(ctx)
        if isinstance(compiled, Err):
            return compiled

        copied = self._copy_descriptor(ctx)
        if isinstance(copied, Err):
            return copied

        name = artifact_name(
            self._config.tool_name, ctx.target_os, ctx.target_arch, ctx.version_tag
        )
        packaged = packager.package(ctx, name)
        if isinstance(packaged, Err):
            return packaged

        return self._publish(packaged.value, name)

    def _compile(self, ctx: ReleaseContext) -> Result[None, BuildError]:
        binary = ctx.workspace / self._config.binary_name
        ldflags = f"-X {self._config.version_variable}={ctx.version_tag}"
        env = {"GOOS": ctx.target_os.goos}
        if ctx.target_arch:
            env["GOARCH"] = ctx.target_arch

        spec = CommandSpec.of(
            "go",
            "build",
            "-ldflags",
            ldflags,
            "-o",
            str(binary),
            self._config.main_package,
            env=env,
            cwd=self._root.path,
        )
        self._console.command(spec.display())
        result = self._runner.run(spec)
        if isinstance(result, Err):
            return Err(BuildError(message=result.error.message, returncode=result.error.returncode))
        return Ok(None)

    def _copy_descriptor(self, ctx: ReleaseContext) -> Result[None, PackagingError]:
        src = self._root.join(self._config.descriptor)
        try:
            shutil.copyfile(src, ctx.workspace / DESCRIPTOR_NAME)
        except FileNotFoundError:
            return Err(PackagingError(message=f"packaging descriptor not found: {src}"))
        except OSError as e:
            return Err(PackagingError(message=f"copy {src}: {e}"))
        return Ok(None)

    def _publish(self, archive: Path, name: str) -> Result[Artifact, PackagingError]:
        dest = self.dist_dir / name
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(archive), dest)
        except OSError as e:
            return Err(PackagingError(message=f"move {name} to {dest.parent}: {e}"))
        return Ok(Artifact(name=name, path=dest))
