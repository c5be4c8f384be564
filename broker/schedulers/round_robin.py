"""Round-Robin Scheduler — baseline that cycles tasks over resources in order."""

from broker.models.task import Task
from broker.models.resource import Resource
from broker.schedulers.base import BaseScheduler, Assignment, ScheduleResult
from broker.schedulers.matrix import validate_inputs


class RoundRobinScheduler(BaseScheduler):
    """Binds task i (in submission order) to resource i mod len(resources)."""

    def schedule(
        self,
        tasks: list[Task],
        resources: list[Resource],
    ) -> ScheduleResult:
        validate_inputs(tasks, resources)

        assignments: list[Assignment] = []
        ready_times = [r.ready_time for r in resources]

        for index, task in enumerate(tasks):
            column = index % len(resources)
            resource = resources[column]
            ready_times[column] += task.execution_time(resource.speed)
            assignments.append(
                Assignment(
                    task_id=task.id,
                    resource_id=resource.id,
                    completion_time=ready_times[column],
                )
            )

        return self._publish(assignments, resources, ready_times)
