"""
Tests for the Dispatch Simulator and metrics.

These tests verify:
    1. Tasks run one at a time per resource, in commit order
    2. Events are processed in chronological order
    3. Replayed finish times match the scheduler's predictions
    4. Metrics are calculated correctly
"""

import io

import pytest
from rich.console import Console

from broker.models.task import Task, TaskStatus
from broker.models.resource import Resource
from broker.schedulers.round_robin import RoundRobinScheduler
from broker.schedulers.suffrage import SuffrageScheduler
from broker.simulator.engine import DispatchSimulator
from broker.simulator.events import EventType
from broker.simulator.generator import ScenarioGenerator


class TestDispatchSimulator:
    """Tests for the event-driven replay."""

    def _worked_example(self):
        tasks = [Task(id=0, length=4000.0), Task(id=1, length=1000.0)]
        resources = [Resource(id=0, speed=100.0), Resource(id=1, speed=50.0)]
        return tasks, resources

    def test_replay_worked_example(self):
        """Both tasks start at 0 on separate resources."""
        tasks, resources = self._worked_example()
        result = SuffrageScheduler().schedule(tasks, resources)

        sim = DispatchSimulator(tasks, resources, result)
        sim.run()

        first, second = sim.records[0], sim.records[1]
        assert (first.resource_id, first.start_time, first.finish_time) == (0, 0.0, 40.0)
        assert (second.resource_id, second.start_time, second.finish_time) == (1, 0.0, 20.0)
        assert all(r.status == TaskStatus.COMPLETED for r in sim.records.values())

    def test_tasks_queue_on_one_resource(self):
        """A resource starts its next task when the previous one finishes."""
        tasks = [Task(id=0, length=100.0), Task(id=1, length=200.0), Task(id=2, length=300.0)]
        resources = [Resource(id=0, speed=10.0)]
        result = RoundRobinScheduler().schedule(tasks, resources)

        sim = DispatchSimulator(tasks, resources, result)
        sim.run()

        starts = [sim.records[i].start_time for i in range(3)]
        finishes = [sim.records[i].finish_time for i in range(3)]
        assert starts == [0.0, 10.0, 30.0]
        assert finishes == [10.0, 30.0, 60.0]

    def test_events_chronological(self):
        """Events must be processed in non-decreasing time order."""
        gen = ScenarioGenerator(seed=42)
        tasks = gen.generate_tasks(num_tasks=20)
        resources = gen.generate_resources(num_resources=3)
        result = SuffrageScheduler().schedule(tasks, resources)

        sim = DispatchSimulator(tasks, resources, result)
        sim.run()

        times = [e.time for e in sim.event_log]
        assert times == sorted(times)
        assert len(sim.event_log) == 2 * len(tasks)
        assert sum(1 for e in sim.event_log if e.event_type == EventType.TASK_START) == len(tasks)

    def test_replay_matches_predicted_completion(self):
        """Finish times in the replay equal the scheduler's completion estimates."""
        gen = ScenarioGenerator(seed=5)
        tasks = gen.generate_tasks(num_tasks=30)
        resources = gen.generate_resources(num_resources=4)
        result = SuffrageScheduler().schedule(tasks, resources)

        sim = DispatchSimulator(tasks, resources, result)
        metrics = sim.run()

        for assignment in result.assignments:
            record = sim.records[assignment.task_id]
            assert record.resource_id == assignment.resource_id
            assert record.finish_time == pytest.approx(assignment.completion_time)
        assert metrics.report.makespan == pytest.approx(result.makespan)

    def test_no_assignments(self):
        """An empty schedule replays to an empty report."""
        resources = [Resource(id=0, speed=10.0)]
        result = SuffrageScheduler().schedule([], resources)

        metrics = DispatchSimulator([], resources, result).run()

        assert metrics.report.total_tasks == 0
        assert metrics.report.makespan == 0.0


class TestMetricsCollector:
    """Tests for metrics computed from a replay."""

    def _run(self):
        tasks = [Task(id=0, length=4000.0), Task(id=1, length=1000.0)]
        resources = [Resource(id=0, speed=100.0), Resource(id=1, speed=50.0)]
        result = SuffrageScheduler().schedule(tasks, resources)
        sim = DispatchSimulator(tasks, resources, result)
        return sim, sim.run()

    def test_worked_example_metrics(self):
        _, metrics = self._run()
        report = metrics.report

        assert report.scheduler_name == "SuffrageScheduler"
        assert report.total_tasks == 2
        assert report.tasks_completed == 2
        assert report.makespan == 40.0
        assert report.flowtime == 60.0
        assert report.avg_completion_time == 30.0
        assert report.throughput == pytest.approx(0.05)
        assert report.per_resource_utilization == {0: 1.0, 1: 0.5}
        assert report.per_resource_tasks == {0: 1, 1: 1}
        assert report.avg_resource_utilization == pytest.approx(0.75)
        assert report.load_imbalance == pytest.approx(20.0 / 30.0)

    def test_print_report(self):
        """The rich report renders the headline numbers."""
        sim, metrics = self._run()
        buffer = io.StringIO()
        console = Console(file=buffer, width=120)

        metrics.print_report(console)
        metrics.print_task_records(list(sim.records.values()), console)

        output = buffer.getvalue()
        assert "Makespan" in output
        assert "40.00" in output
        assert "completed" in output
