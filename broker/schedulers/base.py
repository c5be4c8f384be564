"""Base Scheduler — abstract interface for batch task-to-resource binding."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from broker.models.task import Task
from broker.models.resource import Resource

if TYPE_CHECKING:
    from broker.schedulers.suffrage import RoundDecision


@dataclass(frozen=True)
class Assignment:
    """Immutable scheduling decision: bind a task to a resource."""
    task_id: int
    resource_id: int
    completion_time: float


@dataclass
class ScheduleResult:
    """Outcome of one scheduling run. Assignments are kept in commit order."""
    scheduler_name: str
    assignments: list[Assignment] = field(default_factory=list)
    ready_times: dict[int, float] = field(default_factory=dict)
    resources: list[Resource] = field(default_factory=list)
    trace: list["RoundDecision"] = field(default_factory=list)

    @property
    def makespan(self) -> float:
        """Time at which the last resource finishes its last task."""
        return max((a.completion_time for a in self.assignments), default=0.0)

    def as_pairs(self) -> list[tuple[int, int]]:
        """(task id, resource id) pairs in commit order."""
        return [(a.task_id, a.resource_id) for a in self.assignments]

    def tasks_on(self, resource_id: int) -> list[int]:
        """Task ids bound to a resource, in the order they will run."""
        return [a.task_id for a in self.assignments if a.resource_id == resource_id]


class BaseScheduler(ABC):
    """Abstract base class for all schedulers. Subclasses implement schedule()."""

    @abstractmethod
    def schedule(
        self,
        tasks: list[Task],
        resources: list[Resource],
    ) -> ScheduleResult:
        """Bind every task to a resource and return the ordered result."""
        ...

    @property
    def name(self) -> str:
        """Human-readable scheduler name for reports."""
        return self.__class__.__name__

    def _publish(
        self,
        assignments: list[Assignment],
        resources: list[Resource],
        ready_times: list[float],
        trace: list["RoundDecision"] | None = None,
    ) -> ScheduleResult:
        """Package a finished run without touching the caller's resources."""
        return ScheduleResult(
            scheduler_name=self.name,
            assignments=assignments,
            ready_times={r.id: t for r, t in zip(resources, ready_times)},
            resources=[
                r.model_copy(update={"ready_time": t})
                for r, t in zip(resources, ready_times)
            ],
            trace=trace or [],
        )
