"""Scenario generator — creates reproducible task/resource batches."""

import random
from broker.models.task import Task
from broker.models.resource import Resource


class ScenarioGenerator:
    """Generates deterministic task/resource scenarios using a seeded RNG."""

    def __init__(self, seed: int = 42):
        self.rng = random.Random(seed)
        self._task_counter = 0
        self._resource_counter = 0

    def generate_tasks(
        self,
        num_tasks: int = 50,
        min_length: float = 1000.0,
        max_length: float = 10000.0,
    ) -> list[Task]:
        """Generate tasks with uniformly drawn lengths and sequential ids."""
        tasks: list[Task] = []
        for _ in range(num_tasks):
            tasks.append(Task(
                id=self._task_counter,
                length=round(self.rng.uniform(min_length, max_length), 0),
            ))
            self._task_counter += 1
        return tasks

    def generate_resources(
        self,
        num_resources: int = 5,
        min_speed: float = 50.0,
        max_speed: float = 250.0,
    ) -> list[Resource]:
        """Generate heterogeneous resources, all free at time 0."""
        resources: list[Resource] = []
        for _ in range(num_resources):
            resources.append(Resource(
                id=self._resource_counter,
                speed=round(self.rng.uniform(min_speed, max_speed), 0),
            ))
            self._resource_counter += 1
        return resources

    @staticmethod
    def extended_example(
        num_tasks: int = 10, num_resources: int = 3
    ) -> tuple[list[Task], list[Resource]]:
        """Fixed layout: resource i runs at 100 + 50*i, task i has length 4000 + 1000*i."""
        resources = [Resource(id=i, speed=100.0 + i * 50.0) for i in range(num_resources)]
        tasks = [Task(id=i, length=4000.0 + i * 1000.0) for i in range(num_tasks)]
        return tasks, resources
