"""Tests for cci.services.steps module."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from cci.core.config import EnvSettings, ProjectConfig
from cci.core.project import ProjectRoot
from cci.core.result import Err, Ok, Result
from cci.output.console import MockConsole
from cci.platform.detection import TargetOS
from cci.platform.process import (
    EXEC_FAILED_MESSAGE,
    CommandResult,
    CommandSpec,
    ExecutionError,
    StreamMode,
)
from cci.services import steps as steps_module
from cci.services.consistency import UncommittedChangesError
from cci.services.release import UnsupportedPlatformError
from cci.services.steps import PipelineSteps, filter_packages
from cci.test._fakes import FakeRunner, fail, fake_toolchain, ok

GO_PACKAGES = "\n".join(
    [
        "cdr.dev/coder-cli/cmd/coder",
        "cdr.dev/coder-cli/internal/cmd",
        "cdr.dev/coder-cli/pkg/tcli",
        "cdr.dev/coder-cli/ci/integration",
        "cdr.dev/coder-cli/coder-sdk",
    ]
)


@pytest.fixture
def root(tmp_path: Path) -> ProjectRoot:
    path = tmp_path / "coder-cli"
    (path / "ci").mkdir(parents=True)
    (path / "ci" / "gon.json").write_text("{}", encoding="utf-8")
    return ProjectRoot(path)


def _steps(
    root: ProjectRoot,
    runner: FakeRunner,
    *,
    env: EnvSettings | None = None,
    console: MockConsole | None = None,
) -> PipelineSteps:
    return PipelineSteps(
        root=root,
        config=ProjectConfig(),
        env=env or EnvSettings(),
        runner=runner,
        console=console or MockConsole(),
    )


def _responder(
    answers: dict[tuple[str, ...], Result[CommandResult, ExecutionError]],
) -> FakeRunner:
    """Runner answering by argv prefix, ``ok()`` otherwise."""

    def handler(spec: CommandSpec) -> Result[CommandResult, ExecutionError]:
        for prefix, answer in answers.items():
            if spec.argv[: len(prefix)] == prefix:
                return answer
        return ok()

    return FakeRunner(handler)


def test_filter_packages() -> None:
    packages = GO_PACKAGES.splitlines()

    kept = filter_packages(packages, ("pkg/tcli", "ci/integration", "coder-sdk"))

    assert kept == ["cdr.dev/coder-cli/cmd/coder", "cdr.dev/coder-cli/internal/cmd"]


class TestLint:
    def test_runs_golangci_lint_in_root(self, root: ProjectRoot) -> None:
        runner = FakeRunner()

        assert _steps(root, runner).lint() == Ok(None)
        assert runner.argvs == [("golangci-lint", "run", "-c", ".golangci.yml")]
        assert runner.calls[0].cwd == root.path
        assert runner.calls[0].mode == StreamMode.INHERITED

    def test_failure_has_fixed_message(self, root: ProjectRoot) -> None:
        runner = FakeRunner(lambda spec: fail("lint output", returncode=1))

        result = _steps(root, runner).lint()

        assert isinstance(result, Err)
        assert result.error.message == EXEC_FAILED_MESSAGE


class TestUnitTest:
    def test_excludes_integration_and_sdk(self, root: ProjectRoot) -> None:
        runner = _responder({("go", "list"): ok(GO_PACKAGES)})

        assert _steps(root, runner).unit_test() == Ok(None)
        assert runner.argvs == [
            ("go", "list", "./..."),
            ("go", "test", "cdr.dev/coder-cli/cmd/coder", "cdr.dev/coder-cli/internal/cmd"),
        ]

    def test_nothing_left_to_test(self, root: ProjectRoot) -> None:
        runner = _responder({("go", "list"): ok("cdr.dev/coder-cli/coder-sdk")})
        console = MockConsole()

        assert _steps(root, runner, console=console).unit_test() == Ok(None)
        assert runner.programs() == ["go"]
        assert console.find("no Go packages")


class TestFmt:
    def test_command_sequence(self, root: ProjectRoot) -> None:
        runner = _responder({("go", "list", "-m"): ok("cdr.dev/coder-cli\n")})

        assert _steps(root, runner).fmt() == Ok(None)
        assert runner.argvs == [
            ("go", "mod", "tidy"),
            ("gofmt", "-w", "-s", "."),
            ("go", "list", "-m"),
            ("goimports", "-w", "-local=cdr.dev/coder-cli", "."),
        ]

    def test_ci_checks_for_drift(self, root: ProjectRoot) -> None:
        runner = _responder(
            {
                ("go", "list", "-m"): ok("cdr.dev/coder-cli"),
                ("git",): ok("internal/cmd/envs.go\0"),
            }
        )

        result = _steps(root, runner, env=EnvSettings(ci=True)).fmt()

        assert isinstance(result, Err)
        assert isinstance(result.error, UncommittedChangesError)
        assert result.error.report.paths == ("internal/cmd/envs.go",)

    def test_ci_clean_tree_passes(self, root: ProjectRoot) -> None:
        runner = _responder({("go", "list", "-m"): ok("cdr.dev/coder-cli")})

        assert _steps(root, runner, env=EnvSettings(ci=True)).fmt() == Ok(None)
        assert runner.programs()[-1] == "git"

    def test_stops_at_first_failure(self, root: ProjectRoot) -> None:
        runner = _responder({("gofmt",): fail()})

        result = _steps(root, runner, env=EnvSettings(ci=True)).fmt()

        assert isinstance(result, Err)
        assert runner.programs() == ["go", "gofmt"]


class TestGendocs:
    def test_recreates_docs_dir(self, root: ProjectRoot) -> None:
        docs = root.join("docs")
        docs.mkdir()
        (docs / "stale.md").write_text("old", encoding="utf-8")
        runner = FakeRunner()

        assert _steps(root, runner).gendocs() == Ok(None)
        assert docs.is_dir()
        assert list(docs.iterdir()) == []
        assert runner.argvs == [("go", "run", "./cmd/coder", "gen-docs", "./docs")]

    def test_missing_docs_dir_is_created(self, root: ProjectRoot) -> None:
        assert _steps(root, FakeRunner()).gendocs() == Ok(None)
        assert root.join("docs").is_dir()

    def test_ci_drift(self, root: ProjectRoot) -> None:
        runner = _responder({("git",): ok("docs/coder_envs.md\0")})

        result = _steps(root, runner, env=EnvSettings(ci=True)).gendocs()

        assert isinstance(result, Err)
        assert isinstance(result.error, UncommittedChangesError)


class TestIntegration:
    def test_builds_image_then_runs_tests(self, root: ProjectRoot) -> None:
        runner = FakeRunner()
        console = MockConsole()

        assert _steps(root, runner, console=console).integration() == Ok(None)
        assert runner.argvs == [
            (
                "docker",
                "build",
                "-f",
                "ci/integration/Dockerfile",
                "-t",
                "coder-cli-integration:latest",
                ".",
            ),
            ("go", "test", "./ci/integration", "-count=1"),
        ]
        assert console.find("--- run go tests")

    def test_image_failure_skips_tests(self, root: ProjectRoot) -> None:
        runner = _responder({("docker",): fail()})

        assert isinstance(_steps(root, runner).integration(), Err)
        assert runner.programs() == ["docker"]


class TestBuild:
    @pytest.fixture(autouse=True)
    def _scratch(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        scratch = tmp_path / "tmp"
        scratch.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(scratch))

    def test_linux_release(self, root: ProjectRoot) -> None:
        runner = FakeRunner(fake_toolchain(describe="v1.0.0"))
        console = MockConsole()
        env = EnvSettings(goos="linux", goarch="amd64")

        result = _steps(root, runner, env=env, console=console).build()

        assert isinstance(result, Ok)
        assert result.value.name == "coder-cli-linux-amd64-v1.0.0.tar.gz"
        assert result.value.path == root.join("dist/coder-cli-linux-amd64-v1.0.0.tar.gz")
        assert runner.programs() == ["git", "go", "tar"]
        assert console.find("--- building coder-cli for linux-amd64")

    def test_unsupported_goos_runs_nothing(self, root: ProjectRoot) -> None:
        runner = FakeRunner(fake_toolchain())

        result = _steps(root, runner, env=EnvSettings(goos="plan9", goarch="amd64")).build()

        assert result == Err(UnsupportedPlatformError(goos="plan9"))
        assert runner.calls == []

    def test_defaults_to_host_platform(
        self, root: ProjectRoot, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(steps_module, "host_target_os", lambda: TargetOS.MACOS)
        monkeypatch.setattr(steps_module, "host_goarch", lambda: "arm64")
        runner = FakeRunner(fake_toolchain(describe="v2.0.0"))

        result = _steps(root, runner).build()

        assert isinstance(result, Ok)
        assert result.value.name == "coder-cli-darwin-arm64-v2.0.0.zip"

    def test_unknown_host(self, root: ProjectRoot, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(steps_module, "host_target_os", lambda: None)
        runner = FakeRunner()

        result = _steps(root, runner).build()

        assert isinstance(result, Err)
        assert isinstance(result.error, UnsupportedPlatformError)
        assert runner.calls == []

    def test_describe_failure(self, root: ProjectRoot) -> None:
        runner = _responder({("git",): fail("fatal: No names found", returncode=128)})

        result = _steps(root, runner, env=EnvSettings(goos="linux")).build()

        assert isinstance(result, Err)
        assert isinstance(result.error, ExecutionError)
        assert runner.programs() == ["git"]

