"""Pipeline services.

Services compose external commands (through ``cci.platform.process``) into
the pipeline's stages. They return Result types; turning an error into an
exit code is the CLI's job.
"""

from cci.services.consistency import ConsistencyGate, ConsistencyReport, UncommittedChangesError
from cci.services.steps import PipelineSteps, StepError

__all__ = [
    "ConsistencyGate",
    "ConsistencyReport",
    "PipelineSteps",
    "StepError",
    "UncommittedChangesError",
]
