"""Drift detection after regeneration steps.

``fmt`` and ``gendocs`` rewrite files in place. In CI the result must match
what is committed: any untracked or modified file means someone forgot to
run the step locally. Outside CI the gate does nothing, so developers can
run the same steps to actually regenerate.
"""

from __future__ import annotations

from dataclasses import dataclass

from cci.core.project import ProjectRoot
from cci.core.result import Err, Ok, Result
from cci.git.repository import Repository
from cci.platform.process import ExecutionError, ProcessRunner

__all__ = ["ConsistencyGate", "ConsistencyReport", "UncommittedChangesError"]


@dataclass(frozen=True, slots=True)
class ConsistencyReport:
    """Root-relative paths that differ from version control, in git's order."""

    paths: tuple[str, ...] = ()

    @property
    def is_clean(self) -> bool:
        return not self.paths


@dataclass(frozen=True, slots=True)
class UncommittedChangesError:
    report: ConsistencyReport

    @property
    def message(self) -> str:
        return "Files need generation or formatting:\n" + "\n".join(self.report.paths)


class ConsistencyGate:
    """Fail when the working tree has drifted from version control.

    Attributes:
        enabled: Whether the gate is active (the ``CI`` flag).
    """

    def __init__(self, *, root: ProjectRoot, runner: ProcessRunner, enabled: bool) -> None:
        self._repo = Repository(root.path, runner)
        self.enabled = enabled

    def check(self) -> Result[ConsistencyReport, UncommittedChangesError | ExecutionError]:
        """Query git once and compare.

        Returns:
            Ok(empty report) when clean or when the gate is disabled,
            Err(UncommittedChangesError) listing drifted files, or
            Err(ExecutionError) if git itself failed.
        """
        if not self.enabled:
            return Ok(ConsistencyReport())

        changed = self._repo.changed_files()
        if isinstance(changed, Err):
            return changed

        report = ConsistencyReport(paths=changed.value)
        if not report.is_clean:
            return Err(UncommittedChangesError(report=report))
        return Ok(report)
