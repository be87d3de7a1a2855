"""Fine-tuning workflow for the discussion model."""

from bibletalk.tuning.workflow import (
    FineTuneError,
    FineTuneJob,
    FineTuneWorkflow,
    JobStatus,
    TuningPhase,
    TuningState,
)

__all__ = [
    "FineTuneError",
    "FineTuneJob",
    "FineTuneWorkflow",
    "JobStatus",
    "TuningPhase",
    "TuningState",
]
