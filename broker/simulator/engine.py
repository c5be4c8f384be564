"""Dispatch Simulator — replays a schedule on space-shared resources."""

import heapq
from collections import deque

from loguru import logger

from broker.models.task import Task, TaskRecord, TaskStatus
from broker.models.resource import Resource
from broker.schedulers.base import ScheduleResult
from broker.simulator.events import Event, EventType
from broker.metrics.collector import MetricsCollector


class DispatchSimulator:
    """Event-driven execution of a ScheduleResult.

    Every resource runs one task at a time, taking its bound tasks in commit
    order. A task starts as soon as its resource is free and holds it for
    length / speed time units. `resources` must be the list handed to the
    scheduler, so each queue starts at the resource's initial ready time.
    """

    def __init__(
        self,
        tasks: list[Task],
        resources: list[Resource],
        result: ScheduleResult,
    ):
        self.tasks: dict[int, Task] = {t.id: t for t in tasks}
        self.resources: dict[int, Resource] = {r.id: r for r in resources}
        self.result = result

        self._event_queue: list[Event] = []
        self._event_counter: int = 0
        self._current_time: float = 0.0
        self._metrics = MetricsCollector()
        self.event_log: list[Event] = []

        self.records: dict[int, TaskRecord] = {}
        self._queues: dict[int, deque[int]] = {r.id: deque() for r in resources}
        for assignment in result.assignments:
            task = self.tasks[assignment.task_id]
            self.records[task.id] = TaskRecord(
                task_id=task.id,
                resource_id=assignment.resource_id,
                length=task.length,
            )
            self._queues[assignment.resource_id].append(task.id)

    def run(self) -> MetricsCollector:
        """Start every resource's queue → process events → return metrics."""
        for resource_id, queue in self._queues.items():
            if queue:
                self._start_next(resource_id, self.resources[resource_id].ready_time)

        while self._event_queue:
            event = heapq.heappop(self._event_queue)
            self._current_time = event.time
            self.event_log.append(event)

            match event.event_type:
                case EventType.TASK_START:
                    self._handle_task_start(event)
                case EventType.TASK_COMPLETION:
                    self._handle_task_completion(event)

        logger.debug(
            f"Dispatch finished at t={self._current_time:.4f} "
            f"after {len(self.event_log)} events"
        )

        self._metrics.calculate(
            records=list(self.records.values()),
            resources=list(self.resources.values()),
            scheduler_name=self.result.scheduler_name,
        )
        return self._metrics

    # ── Event Handlers ────────────────────────────────────────────────

    def _handle_task_start(self, event: Event) -> None:
        """Mark RUNNING and schedule the completion."""
        record = self.records[event.task_id]
        resource = self.resources[event.resource_id]

        record.status = TaskStatus.RUNNING
        record.start_time = self._current_time

        runtime = self.tasks[record.task_id].execution_time(resource.speed)
        self._push_event(Event(
            time=self._current_time + runtime,
            sequence=self._next_sequence(),
            event_type=EventType.TASK_COMPLETION,
            task_id=record.task_id,
            resource_id=resource.id,
        ))

    def _handle_task_completion(self, event: Event) -> None:
        """Mark COMPLETED and hand the resource to its next bound task."""
        record = self.records[event.task_id]
        record.status = TaskStatus.COMPLETED
        record.finish_time = self._current_time

        if self._queues[event.resource_id]:
            self._start_next(event.resource_id, self._current_time)

    # ── Utilities ─────────────────────────────────────────────────────

    def _start_next(self, resource_id: int, at: float) -> None:
        task_id = self._queues[resource_id].popleft()
        self._push_event(Event(
            time=at,
            sequence=self._next_sequence(),
            event_type=EventType.TASK_START,
            task_id=task_id,
            resource_id=resource_id,
        ))

    def _push_event(self, event: Event) -> None:
        """Add an event to the priority queue."""
        heapq.heappush(self._event_queue, event)

    def _next_sequence(self) -> int:
        """Monotonically increasing sequence number for tie-breaking."""
        self._event_counter += 1
        return self._event_counter
