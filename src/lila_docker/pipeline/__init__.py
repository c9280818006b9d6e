"""Setup orchestration pipeline."""

from .result import PipelineResult, PipelineState, StepOutcome
from .runner import Pipeline, SkipStep, Step
from .setup import build_setup_pipeline

__all__ = [
    "Pipeline",
    "PipelineResult",
    "PipelineState",
    "SkipStep",
    "Step",
    "StepOutcome",
    "build_setup_pipeline",
]
