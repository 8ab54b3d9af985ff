"""Classification pipeline: ensure attribute, lint, classify, register, assign."""

from agentic_readiness.pipeline.result import (
    PipelineFailure,
    PipelineResult,
    PipelineSuccess,
    Stage,
    State,
)
from agentic_readiness.pipeline.runner import ReadinessPipeline

__all__ = [
    "PipelineFailure",
    "PipelineResult",
    "PipelineSuccess",
    "ReadinessPipeline",
    "Stage",
    "State",
]
