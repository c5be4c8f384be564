"""Task model — an indivisible unit of work submitted to the broker."""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TaskStatus(str, Enum):
    """Dispatch lifecycle: QUEUED → RUNNING → COMPLETED"""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"


class Task(BaseModel):
    """A batch task with a fixed amount of work. Immutable once submitted."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, description="Unique task identifier")
    length: float = Field(description="Work units needed to complete the task")

    def execution_time(self, speed: float) -> float:
        """Time needed to run this task on a resource of the given speed."""
        return self.length / speed

    def __repr__(self) -> str:
        return f"Task(id={self.id}, length={self.length})"


class TaskRecord(BaseModel):
    """Execution record of a bound task, filled in while it is dispatched."""

    task_id: int = Field(description="Task being executed")
    resource_id: int = Field(description="Resource the task is bound to")
    length: float = Field(ge=0, description="Work units of the task")
    start_time: Optional[float] = Field(default=None, description="When execution began")
    finish_time: Optional[float] = Field(default=None, description="When execution finished")
    status: TaskStatus = Field(default=TaskStatus.QUEUED, description="Current lifecycle state")

    @property
    def execution_time(self) -> Optional[float]:
        """Time the task held its resource."""
        if self.start_time is not None and self.finish_time is not None:
            return self.finish_time - self.start_time
        return None

    def __repr__(self) -> str:
        return (
            f"TaskRecord(task={self.task_id}, resource={self.resource_id}, "
            f"status={self.status.value})"
        )
