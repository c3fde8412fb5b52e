"""Tests for cci.services.consistency module."""

from __future__ import annotations

from pathlib import Path

from cci.core.project import ProjectRoot
from cci.core.result import Err, Ok
from cci.platform.process import ExecutionError
from cci.services.consistency import (
    ConsistencyGate,
    ConsistencyReport,
    UncommittedChangesError,
)
from cci.test._fakes import FakeRunner, fail, ok


def _gate(tmp_path: Path, runner: FakeRunner, *, enabled: bool = True) -> ConsistencyGate:
    return ConsistencyGate(root=ProjectRoot(tmp_path), runner=runner, enabled=enabled)


def test_disabled_gate_never_queries_git(tmp_path: Path) -> None:
    runner = FakeRunner(lambda spec: ok("docs/coder.md\0"))

    result = _gate(tmp_path, runner, enabled=False).check()

    assert result == Ok(ConsistencyReport())
    assert runner.calls == []


def test_clean_tree_passes_every_time(tmp_path: Path) -> None:
    runner = FakeRunner()
    gate = _gate(tmp_path, runner)

    assert gate.check() == Ok(ConsistencyReport())
    assert gate.check() == Ok(ConsistencyReport())
    assert len(runner.calls) == 2


def test_drift_lists_files(tmp_path: Path) -> None:
    runner = FakeRunner(lambda spec: ok("docs/coder.md\0internal/x/y.go\0"))

    result = _gate(tmp_path, runner).check()

    assert isinstance(result, Err)
    assert isinstance(result.error, UncommittedChangesError)
    assert result.error.report.paths == ("docs/coder.md", "internal/x/y.go")
    assert result.error.message == (
        "Files need generation or formatting:\ndocs/coder.md\ninternal/x/y.go"
    )


def test_git_failure_is_not_reported_as_drift(tmp_path: Path) -> None:
    runner = FakeRunner(lambda spec: fail("fatal: not a git repository", returncode=128))

    result = _gate(tmp_path, runner).check()

    assert isinstance(result, Err)
    assert isinstance(result.error, ExecutionError)
