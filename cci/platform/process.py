"""Subprocess execution with Result-based error handling.

Every external tool the pipeline drives (go, git, zip, tar, gon, docker,
golangci-lint) is spawned through this module. A command is described by an
immutable ``CommandSpec`` and executed by a ``ProcessRunner``; services take
the runner as a parameter so tests can substitute a fake that never spawns
anything.

Usage:
    spec = CommandSpec.of("git", "describe", "--tags", cwd=root)
    match run(spec):
        case Ok(result):
            print(result.stdout)
        case Err(error):
            print(f"Failed: {error.message}")

Failure semantics:
- Captured mode: the error message is stderr minus one trailing line break,
  or ``EXEC_FAILED_MESSAGE`` when stderr was empty.
- Inherited mode: the streams went to the terminal, so the message is always
  ``EXEC_FAILED_MESSAGE``.
- Spawn failure (program missing, bad cwd): returncode -1 and the OS error.

Captured output is decoded as UTF-8; undecodable bytes become U+FFFD.

There is no timeout and no retry. A hung child blocks the caller.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum, auto
from pathlib import Path
from typing import Any, Protocol

from cci.core.result import Err, Ok, Result

__all__ = [
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

EXEC_FAILED_MESSAGE = "exec: failed to execute command"


class StreamMode(Enum):
    """Where the child's stdout/stderr go."""

    CAPTURED = auto()  # buffered as text and returned
    INHERITED = auto()  # passed through to our own terminal

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Immutable description of one external-process invocation.

    Attributes:
        command: A shell string (run through the shell) or an argument tuple
            (program + arguments, no shell interpretation).
        env: Environment overrides as sorted ``(name, value)`` pairs. They are
            layered on top of the current environment.
        cwd: Working directory, or None for the caller's.
        mode: Stream handling.
    """

    command: str | tuple[str, ...]
    env: tuple[tuple[str, str], ...] = ()
    cwd: Path | None = None
    mode: StreamMode = StreamMode.CAPTURED

    def __post_init__(self) -> None:
        if isinstance(self.command, list):
            object.__setattr__(self, "command", tuple(self.command))
        if not self.command:
            raise ValueError("CommandSpec requires a non-empty command")

    @classmethod
    def of(
        cls,
        *argv: str,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        mode: StreamMode = StreamMode.CAPTURED,
    ) -> CommandSpec:
        """Build an argument-list spec: ``CommandSpec.of("go", "build", ".")``."""
        return cls(command=tuple(argv), env=_freeze_env(env), cwd=cwd, mode=mode)

    @classmethod
    def shell(
        cls,
        command: str,
        *,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
        mode: StreamMode = StreamMode.CAPTURED,
    ) -> CommandSpec:
        """Build a spec that runs ``command`` through the system shell."""
        return cls(command=command, env=_freeze_env(env), cwd=cwd, mode=mode)

    @property
    def is_shell(self) -> bool:
        return isinstance(self.command, str)

    @property
    def env_overrides(self) -> dict[str, str]:
        return dict(self.env)

    @property
    def argv(self) -> tuple[str, ...]:
        """Argument tuple; a shell spec is wrapped as ``sh -c``."""
        if isinstance(self.command, str):
            return ("sh", "-c", self.command)
        return self.command

    def with_mode(self, mode: StreamMode) -> CommandSpec:
        if mode == self.mode:
            return self
        return replace(self, mode=mode)

    def display(self) -> str:
        """Human readable command line for messages."""
        if isinstance(self.command, str):
            return self.command
        return shlex.join(self.command)


def _freeze_env(env: Mapping[str, str] | None) -> tuple[tuple[str, str], ...]:
    if not env:
        return ()
    return tuple(sorted(env.items()))


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a successful captured command.

    Both streams have had a single trailing line break removed.
    """

    returncode: int
    stdout: str
    stderr: str


@dataclass(frozen=True, slots=True)
class ExecutionError:
    """A command exited non-zero or could not be started.

    Attributes:
        command: Display form of the command.
        returncode: Exit status, -1 if the process never ran.
        message: Trimmed stderr, or a fixed message when there is none.
    """

    command: str
    returncode: int
    message: str

    def __str__(self) -> str:
        return self.message


def trim_trailing_newline(text: str) -> str:
    """Remove exactly one trailing line break, if present."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


class ProcessRunner(Protocol):
    """Anything that can execute a ``CommandSpec``."""

    def run(self, spec: CommandSpec) -> Result[CommandResult, ExecutionError]:
        """Run with captured streams."""
        ...

    def run_inherited(self, spec: CommandSpec) -> Result[None, ExecutionError]:
        """Run with streams passed through to the terminal."""
        ...


class SubprocessRunner:
    """Production runner backed by ``subprocess.run``."""

    def run(self, spec: CommandSpec) -> Result[CommandResult, ExecutionError]:
        spec = spec.with_mode(StreamMode.CAPTURED)
        try:
            proc = subprocess.run(
                **_popen_kwargs(spec),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            return Err(ExecutionError(command=spec.display(), returncode=-1, message=str(e)))

        stdout = trim_trailing_newline(proc.stdout or "")
        stderr = trim_trailing_newline(proc.stderr or "")

        if proc.returncode != 0:
            return Err(
                ExecutionError(
                    command=spec.display(),
                    returncode=proc.returncode,
                    message=stderr or EXEC_FAILED_MESSAGE,
                )
            )

        return Ok(CommandResult(returncode=proc.returncode, stdout=stdout, stderr=stderr))

    def run_inherited(self, spec: CommandSpec) -> Result[None, ExecutionError]:
        spec = spec.with_mode(StreamMode.INHERITED)
        try:
            proc = subprocess.run(**_popen_kwargs(spec), check=False)
        except OSError as e:
            return Err(ExecutionError(command=spec.display(), returncode=-1, message=str(e)))

        if proc.returncode != 0:
            return Err(
                ExecutionError(
                    command=spec.display(),
                    returncode=proc.returncode,
                    message=EXEC_FAILED_MESSAGE,
                )
            )

        return Ok(None)


def _popen_kwargs(spec: CommandSpec) -> dict[str, Any]:
    env: dict[str, str] | None = None
    if spec.env:
        env = {**os.environ, **spec.env_overrides}

    args: str | list[str]
    if isinstance(spec.command, str):
        args = spec.command
    else:
        args = list(spec.command)

    return {
        "args": args,
        "shell": spec.is_shell,
        "cwd": str(spec.cwd) if spec.cwd is not None else None,
        "env": env,
    }


_default_runner = SubprocessRunner()


def run(spec: CommandSpec) -> Result[CommandResult, ExecutionError]:
    """Execute ``spec`` with captured output using the default runner."""
    return _default_runner.run(spec)


def run_inherited(spec: CommandSpec) -> Result[None, ExecutionError]:
    """Execute ``spec`` with inherited output using the default runner."""
    return _default_runner.run_inherited(spec)
