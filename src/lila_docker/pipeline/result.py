"""Pipeline result dataclasses."""

from dataclasses import dataclass, field
from enum import Enum


class PipelineState(str, Enum):
    """Lifecycle of a pipeline run. There is no failed state."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class StepOutcome:
    """Result of a single pipeline step."""

    name: str
    status: str  # "success", "failed", "skipped"
    detail: str = ""
    duration_s: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


@dataclass
class PipelineResult:
    """Aggregated outcomes of a pipeline run."""

    state: PipelineState = PipelineState.NOT_STARTED
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "success")

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def total_duration_s(self) -> float:
        return sum(o.duration_s for o in self.outcomes)

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    def outcome(self, name: str) -> StepOutcome | None:
        """Find the outcome of a step by name."""
        for o in self.outcomes:
            if o.name == name:
                return o
        return None
