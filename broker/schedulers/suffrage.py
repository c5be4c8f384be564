"""Suffrage Scheduler — prioritizes the task that loses most without its best resource.

Each round every unassigned task finds its fastest resource and its suffrage,
the gap between its best and second-best completion time. Every resource keeps
the task with the highest suffrage among those that want it, and the round
commits the single most urgent (task, resource) pair. Tasks that are nearly
indifferent between resources wait, because deferring them costs little.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
from loguru import logger

from broker.models.task import Task
from broker.models.resource import Resource
from broker.schedulers.base import BaseScheduler, Assignment, ScheduleResult
from broker.schedulers.matrix import CompletionTimeMatrix


@dataclass
class SuffrageRecord:
    """Best candidate a resource has seen during the current round."""
    task_id: Optional[int] = None
    suffrage: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.task_id is None


@dataclass(frozen=True)
class Selection:
    """Winner of one round and the per-resource records it was chosen from."""
    task_id: int
    column: int
    suffrage: float
    records: tuple[SuffrageRecord, ...]


@dataclass(frozen=True)
class RoundDecision:
    """Structured trace entry describing one committed round."""
    round: int
    task_id: int
    resource_id: int
    suffrage: float
    completion_time: float
    ready_delta: float
    candidates: dict[int, tuple[int, float]] = field(default_factory=dict)


def row_suffrages(times: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Best column and suffrage for every row of a completion-time block."""
    best = np.argmin(times, axis=1)
    min_times = times[np.arange(times.shape[0]), best]
    if times.shape[1] < 2:
        return best, np.zeros(times.shape[0])
    second = np.partition(times, 1, axis=1)[:, 1]
    return best, second - min_times


def select_round(matrix: CompletionTimeMatrix) -> Selection:
    """Scan every unassigned row and pick the globally most urgent task."""
    slots = matrix.active_slots()
    best_columns, suffrages = row_suffrages(matrix.times[slots])

    # Records are rebuilt every round; an empty record accepts the first
    # task that reaches it, later ones must beat it strictly.
    records = [SuffrageRecord() for _ in matrix.resource_ids]
    for slot, column, suffrage in zip(slots, best_columns, suffrages):
        record = records[column]
        if record.is_empty or suffrage > record.suffrage:
            records[column] = SuffrageRecord(
                task_id=matrix.task_ids[slot], suffrage=float(suffrage)
            )

    winner_column, winner = min(
        ((col, rec) for col, rec in enumerate(records) if not rec.is_empty),
        key=lambda item: (-item[1].suffrage, item[0], item[1].task_id),
    )

    return Selection(
        task_id=winner.task_id,
        column=matrix.best_column(winner.task_id),
        suffrage=winner.suffrage,
        records=tuple(records),
    )


class SuffrageScheduler(BaseScheduler):
    """Greedy makespan heuristic: commit one task per round by largest suffrage."""

    def __init__(
        self,
        record_trace: bool = False,
        on_round: Optional[Callable[[RoundDecision], None]] = None,
    ):
        self.record_trace = record_trace
        self.on_round = on_round

    def schedule(
        self,
        tasks: list[Task],
        resources: list[Resource],
    ) -> ScheduleResult:
        matrix = CompletionTimeMatrix.build(tasks, resources)
        logger.debug(
            f"Suffrage run started: {len(tasks)} tasks, {len(resources)} resources"
        )

        assignments: list[Assignment] = []
        trace: list[RoundDecision] = []
        round_number = 0

        while not matrix.is_empty:
            round_number += 1
            selection = select_round(matrix)
            assignment, delta = self._commit(matrix, selection)
            assignments.append(assignment)

            decision = RoundDecision(
                round=round_number,
                task_id=assignment.task_id,
                resource_id=assignment.resource_id,
                suffrage=selection.suffrage,
                completion_time=assignment.completion_time,
                ready_delta=delta,
                candidates={
                    matrix.resource_ids[col]: (rec.task_id, rec.suffrage)
                    for col, rec in enumerate(selection.records)
                    if not rec.is_empty
                },
            )
            self._emit(decision)
            if self.record_trace:
                trace.append(decision)

        logger.debug(f"Suffrage run finished after {round_number} rounds")
        return self._publish(
            assignments, resources, matrix.ready_times.tolist(), trace
        )

    def _commit(
        self, matrix: CompletionTimeMatrix, selection: Selection
    ) -> tuple[Assignment, float]:
        """Bind the round winner and advance its resource's ready time."""
        completion, delta = matrix.commit(selection.task_id, selection.column)
        assignment = Assignment(
            task_id=selection.task_id,
            resource_id=matrix.resource_ids[selection.column],
            completion_time=completion,
        )
        return assignment, delta

    def _emit(self, decision: RoundDecision) -> None:
        logger.debug(
            f"Round {decision.round}: task {decision.task_id} -> resource "
            f"{decision.resource_id} (suffrage={decision.suffrage:.4f}, "
            f"completes at {decision.completion_time:.4f})"
        )
        if self.on_round is not None:
            self.on_round(decision)
