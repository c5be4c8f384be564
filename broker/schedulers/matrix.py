"""Completion-time matrix — expected finish time of every (task, resource) pair.

Rows follow the task list order and columns follow the resource list order.
Assigned rows are tombstoned through the ``active`` mask rather than removed,
so a task keeps the same row slot for the whole run.
"""

import math

import numpy as np

from broker.errors import Infeasible, InvalidResource, InvalidTask
from broker.models.task import Task
from broker.models.resource import Resource


def validate_inputs(tasks: list[Task], resources: list[Resource]) -> None:
    """Reject input that cannot be scheduled. Resources are checked first."""
    if not resources:
        raise Infeasible("Resource pool is empty; no task can be scheduled")

    seen_resources: set[int] = set()
    for resource in resources:
        if not math.isfinite(resource.speed) or resource.speed <= 0:
            raise InvalidResource(
                f"Resource {resource.id} has invalid speed {resource.speed}"
            )
        if resource.id in seen_resources:
            raise InvalidResource(f"Duplicate resource id {resource.id}")
        seen_resources.add(resource.id)

    seen_tasks: set[int] = set()
    for task in tasks:
        if not math.isfinite(task.length) or task.length < 0:
            raise InvalidTask(f"Task {task.id} has invalid length {task.length}")
        if task.id in seen_tasks:
            raise InvalidTask(f"Duplicate task id {task.id}")
        seen_tasks.add(task.id)


class CompletionTimeMatrix:
    """Expected completion times for the unassigned tasks of one run."""

    def __init__(
        self,
        task_ids: list[int],
        resource_ids: list[int],
        times: np.ndarray,
        ready_times: np.ndarray,
    ):
        self.task_ids = list(task_ids)
        self.resource_ids = list(resource_ids)
        self.times = times
        self.ready_times = ready_times
        self.active = np.ones(len(self.task_ids), dtype=bool)
        self._slots: dict[int, int] = {tid: i for i, tid in enumerate(self.task_ids)}

    @classmethod
    def build(cls, tasks: list[Task], resources: list[Resource]) -> "CompletionTimeMatrix":
        """Validate the input and seed cell(t, r) = length / speed + ready time."""
        validate_inputs(tasks, resources)

        lengths = np.array([t.length for t in tasks], dtype=float)
        speeds = np.array([r.speed for r in resources], dtype=float)
        ready = np.array([r.ready_time for r in resources], dtype=float)

        times = lengths.reshape(-1, 1) / speeds.reshape(1, -1) + ready.reshape(1, -1)

        return cls(
            task_ids=[t.id for t in tasks],
            resource_ids=[r.id for r in resources],
            times=times,
            ready_times=ready,
        )

    @property
    def remaining(self) -> int:
        """Number of tasks not yet assigned."""
        return int(self.active.sum())

    @property
    def is_empty(self) -> bool:
        return not self.active.any()

    def active_slots(self) -> np.ndarray:
        """Row slots of the unassigned tasks, in task list order."""
        return np.flatnonzero(self.active)

    def slot_of(self, task_id: int) -> int:
        return self._slots[task_id]

    def row(self, task_id: int) -> np.ndarray:
        """Current completion-time estimates of one task across all resources."""
        return self.times[self._slots[task_id]]

    def best_column(self, task_id: int) -> int:
        """Column of the task's earliest completion; lowest index wins ties."""
        return int(np.argmin(self.row(task_id)))

    def commit(self, task_id: int, column: int) -> tuple[float, float]:
        """Bind a task to a column and push the new ready time down that column.

        Returns (completion time, ready-time delta). Other columns are untouched.
        """
        slot = self._slots[task_id]
        if not self.active[slot]:
            raise KeyError(f"Task {task_id} is already assigned")

        completion = float(self.times[slot, column])
        old_ready = float(self.ready_times[column])
        self.ready_times[column] = completion
        delta = completion - old_ready

        self.active[slot] = False
        if delta:
            self.times[self.active, column] += delta

        return completion, delta

    def snapshot(self) -> dict[int, list[float]]:
        """Active rows keyed by task id, for diagnostics and tests."""
        return {
            self.task_ids[slot]: self.times[slot].tolist()
            for slot in self.active_slots()
        }
