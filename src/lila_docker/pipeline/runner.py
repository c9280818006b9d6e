"""Best-effort step pipeline: every step runs, failures are recorded."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from lila_docker.ops.base import StepError

from .result import PipelineResult, PipelineState, StepOutcome

logger = logging.getLogger(__name__)


class SkipStep(Exception):
    """Raised by a step action that has nothing to do this run."""


@dataclass
class Step:
    """A named unit of work.

    The action returns an optional detail message on success, raises
    StepError on failure, or raises SkipStep when it does not apply.
    """

    name: str
    action: Callable[[], str | None]


class Pipeline:
    """Run steps in order with per-step error isolation.

    A failed step never stops the pipeline: the run always ends in
    COMPLETED with one outcome per step.
    """

    def __init__(self, steps: Iterable[Step]) -> None:
        self.steps = list(steps)
        self.state = PipelineState.NOT_STARTED
        self.step_index: int | None = None

    def run(
        self, on_step: Callable[[int, Step], None] | None = None
    ) -> PipelineResult:
        """Execute every step.

        Args:
            on_step: Optional callback invoked before each step with its
                index and the step itself.

        Returns:
            PipelineResult with one outcome per step.
        """
        result = PipelineResult()
        self.state = result.state = PipelineState.RUNNING

        for index, step in enumerate(self.steps):
            self.step_index = index
            if on_step:
                on_step(index, step)
            outcome = self._execute(step)
            result.outcomes.append(outcome)

        self.step_index = None
        self.state = result.state = PipelineState.COMPLETED

        logger.info(
            f"Pipeline complete: Total: {result.total}, "
            f"Succeeded: {result.succeeded}, "
            f"Failed: {result.failed}, "
            f"Skipped: {result.skipped}"
        )
        return result

    def _execute(self, step: Step) -> StepOutcome:
        logger.info(f"Starting step: {step.name}")
        start = time.monotonic()
        try:
            detail = step.action() or ""
        except SkipStep as e:
            logger.info(f"Step '{step.name}' skipped: {e}")
            return StepOutcome(
                name=step.name,
                status="skipped",
                detail=str(e),
                duration_s=time.monotonic() - start,
            )
        except StepError as e:
            logger.warning(f"Step '{step.name}' failed: {e}")
            return StepOutcome(
                name=step.name,
                status="failed",
                detail=str(e),
                duration_s=time.monotonic() - start,
            )
        except Exception as e:
            logger.exception(f"Step '{step.name}' raised an unexpected error")
            return StepOutcome(
                name=step.name,
                status="failed",
                detail=f"{type(e).__name__}: {e}",
                duration_s=time.monotonic() - start,
            )

        logger.info(f"Step '{step.name}' succeeded")
        return StepOutcome(
            name=step.name,
            status="success",
            detail=detail,
            duration_s=time.monotonic() - start,
        )
