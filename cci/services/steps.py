"""CI pipeline steps.

Each step is a short sequence of external commands run from the project
root. Steps stop at the first failing command and return its error; there
is no retry and no partial recovery.

Inputs come from the environment (``GOOS``, ``GOARCH``, ``CI``) and the
project config, never from flags.
"""

from __future__ import annotations

import shutil
import sys

from cci.core.config import EnvSettings, ProjectConfig
from cci.core.project import ProjectRoot
from cci.core.result import Err, Ok, Result
from cci.git.repository import Repository
from cci.output.console import ConsoleProtocol
from cci.platform.detection import host_goarch, host_target_os, parse_target_os
from cci.platform.files import FileError
from cci.platform.process import CommandSpec, ExecutionError, ProcessRunner

from .consistency import ConsistencyGate, UncommittedChangesError
from .release import Artifact, ReleaseBuilder, ReleaseError, UnsupportedPlatformError

__all__ = ["PipelineSteps", "StepError", "filter_packages"]

StepError = ExecutionError | UncommittedChangesError | FileError


def filter_packages(packages: list[str], exclude: tuple[str, ...]) -> list[str]:
    """Drop Go packages whose import path contains any excluded fragment."""
    return [p for p in packages if not any(fragment in p for fragment in exclude)]


class PipelineSteps:
    """The pipeline's stages, bound to one project root."""

    def __init__(
        self,
        *,
        root: ProjectRoot,
        config: ProjectConfig,
        env: EnvSettings,
        runner: ProcessRunner,
        console: ConsoleProtocol,
    ) -> None:
        self._root = root
        self._config = config
        self._env = env
        self._runner = runner
        self._console = console

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def lint(self) -> Result[None, StepError]:
        self._console.step("golangci-lint")
        return self._exec("golangci-lint", "run", "-c", self._config.lint.config)

    def unit_test(self) -> Result[None, StepError]:
        self._console.step("running unit tests")
        listed = self._capture("go", "list", "./...")
        if isinstance(listed, Err):
            return listed

        packages = filter_packages(listed.value.splitlines(), self._config.unit_test.exclude)
        if not packages:
            self._console.warning("no Go packages left to test")
            return Ok(None)
        return self._exec("go", "test", *packages)

    def fmt(self) -> Result[None, StepError]:
        self._console.step("formatting")
        for argv in (("go", "mod", "tidy"), ("gofmt", "-w", "-s", ".")):
            result = self._exec(*argv)
            if isinstance(result, Err):
                return result

        module = self._capture("go", "list", "-m")
        if isinstance(module, Err):
            return module

        result = self._exec("goimports", "-w", f"-local={module.value.strip()}", ".")
        if isinstance(result, Err):
            return result
        return self._require_no_drift()

    def gendocs(self) -> Result[None, StepError]:
        self._console.step("regenerating documentation")
        docs_dir = self._root.join(self._config.docs.dir)
        try:
            shutil.rmtree(docs_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            return Err(FileError(message=f"remove {docs_dir}: {e}", path=docs_dir))
        try:
            docs_dir.mkdir(parents=True)
        except OSError as e:
            return Err(FileError(message=f"create {docs_dir}: {e}", path=docs_dir))

        result = self._exec(
            "go",
            "run",
            self._config.release.main_package,
            "gen-docs",
            f"./{self._config.docs.dir}",
        )
        if isinstance(result, Err):
            return result
        return self._require_no_drift()

    def integration(self) -> Result[None, StepError]:
        cfg = self._config.integration
        self._console.step("building integration test image")
        built = self._exec("docker", "build", "-f", cfg.dockerfile, "-t", cfg.image, ".")
        if isinstance(built, Err):
            return built

        self._console.step("run go tests")
        return self._exec("go", "test", cfg.package, "-count=1")

    def build(self) -> Result[Artifact, ReleaseError | ExecutionError]:
        """Release build for ``GOOS``/``GOARCH`` (host platform when unset)."""
        goos = self._env.goos
        if goos is None:
            host = host_target_os()
            if host is None:
                return Err(UnsupportedPlatformError(goos=sys.platform))
            goos = host.goos

        # Validate before describing or compiling anything.
        target = parse_target_os(goos)
        if target is None:
            return Err(UnsupportedPlatformError(goos=goos))
        goarch = self._env.goarch or host_goarch()

        tag = Repository(self._root.path, self._runner).describe_tags()
        if isinstance(tag, Err):
            return tag

        self._console.step(f"building {self._config.release.tool_name} for {goos}-{goarch}")
        builder = ReleaseBuilder(
            root=self._root,
            config=self._config.release,
            runner=self._runner,
            console=self._console,
        )
        return builder.build_release(target, goarch, tag.value)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _exec(self, *argv: str) -> Result[None, ExecutionError]:
        spec = CommandSpec.of(*argv, cwd=self._root.path)
        self._console.command(spec.display())
        return self._runner.run_inherited(spec)

    def _capture(self, *argv: str) -> Result[str, ExecutionError]:
        spec = CommandSpec.of(*argv, cwd=self._root.path)
        return self._runner.run(spec).map(lambda r: r.stdout)

    def _require_no_drift(self) -> Result[None, StepError]:
        gate = ConsistencyGate(root=self._root, runner=self._runner, enabled=self._env.ci)
        checked = gate.check()
        if isinstance(checked, Err):
            return checked
        return Ok(None)
