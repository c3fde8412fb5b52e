from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from cci.core.config import EnvSettings, ProjectConfig, load_config_or_default, load_env
from cci.core.errors import ErrorCode
from cci.core.project import ProjectRoot, resolve_project_root
from cci.core.result import Err
from cci.output.console import ConsoleProtocol, RichConsole
from cci.output.errors import print_pipeline_error
from cci.platform.process import ProcessRunner, SubprocessRunner
from cci.services.steps import PipelineSteps


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: ProjectRoot
    config: ProjectConfig
    env: EnvSettings
    runner: ProcessRunner
    console: ConsoleProtocol

    def steps(self) -> PipelineSteps:
        return PipelineSteps(
            root=self.root,
            config=self.config,
            env=self.env,
            runner=self.runner,
            console=self.console,
        )


def build_context() -> CLIContext:
    """Resolve the project root (once) and load settings for a command."""
    console = RichConsole()
    runner = SubprocessRunner()

    root_result = resolve_project_root(runner)
    if isinstance(root_result, Err):
        console.error(f"not inside a git repository: {root_result.error.message}")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    root = root_result.value

    config_result = load_config_or_default(root.config_path)
    if isinstance(config_result, Err):
        print_pipeline_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        root=root,
        config=config_result.value,
        env=load_env(os.environ),
        runner=runner,
        console=console,
    )
