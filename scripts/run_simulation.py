"""Entry point for scheduling a batch and replaying it.

Run from a checkout after `pip install -e .`, which puts `broker` on the path.

Usage:
    python scripts/run_simulation.py --tasks 50 --resources 5 --scheduler suffrage
    python scripts/run_simulation.py --example --trace
    python scripts/run_simulation.py --scenario batch.yaml
"""

import argparse
import sys
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.table import Table

from broker.errors import SchedulingError
from broker.models.task import Task
from broker.models.resource import Resource
from broker.schedulers.round_robin import RoundRobinScheduler
from broker.schedulers.suffrage import SuffrageScheduler, RoundDecision
from broker.simulator.engine import DispatchSimulator
from broker.simulator.generator import ScenarioGenerator
from broker.simulator.scenario import load_scenario

console = Console()


def configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr; DEBUG shows every scheduling round."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def get_scheduler(name: str, trace: bool = False):
    """Factory function to get a scheduler by name."""
    schedulers = {
        "suffrage": lambda: SuffrageScheduler(record_trace=trace),
        "round-robin": RoundRobinScheduler,
    }
    if name.lower() not in schedulers:
        available = ", ".join(schedulers.keys())
        raise ValueError(f"Unknown scheduler: {name}. Available: {available}")
    return schedulers[name.lower()]()


def build_scenario(args) -> tuple[list[Task], list[Resource]]:
    """Tasks/resources from a file, the fixed example, or the seeded generator."""
    if args.scenario:
        scenario = load_scenario(Path(args.scenario))
        return scenario.tasks, scenario.resources
    if args.example:
        return ScenarioGenerator.extended_example(args.tasks, args.resources)
    generator = ScenarioGenerator(seed=args.seed)
    tasks = generator.generate_tasks(num_tasks=args.tasks)
    resources = generator.generate_resources(num_resources=args.resources)
    return tasks, resources


def print_scenario_summary(tasks: list[Task], resources: list[Resource]) -> None:
    """Print a summary of the scenario."""
    console.print("\n[bold cyan]Scenario[/bold cyan]")
    console.print(f"  Tasks:     {len(tasks)}")
    console.print(f"  Resources: {len(resources)}")
    total_work = sum(t.length for t in tasks)
    console.print(f"  Total work: {total_work:.0f}")
    for r in resources:
        console.print(f"  resource {r.id}: speed={r.speed:.0f}, ready={r.ready_time:.2f}")
    console.print()


def print_trace(trace: list[RoundDecision]) -> None:
    """Print the round-by-round decisions of a suffrage run."""
    table = Table(title="Suffrage Rounds", border_style="yellow")
    for column in ("Round", "Task", "Resource", "Suffrage", "Completes", "Candidates"):
        table.add_column(column, justify="right")
    for d in trace:
        candidates = ", ".join(
            f"r{rid}:t{tid}({s:.2f})" for rid, (tid, s) in sorted(d.candidates.items())
        )
        table.add_row(
            str(d.round), str(d.task_id), str(d.resource_id),
            f"{d.suffrage:.2f}", f"{d.completion_time:.2f}", candidates,
        )
    console.print(table)


def main():
    parser = argparse.ArgumentParser(
        description="Suffrage Broker — batch task-to-resource scheduling"
    )
    parser.add_argument("--tasks", type=int, default=50, help="Number of tasks (default: 50)")
    parser.add_argument("--resources", type=int, default=5, help="Number of resources (default: 5)")
    parser.add_argument("--scheduler", type=str, default="suffrage",
                        help="Scheduler: suffrage, round-robin (default: suffrage)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--scenario", type=str, default=None, help="YAML/JSON scenario file")
    parser.add_argument("--example", action="store_true",
                        help="Use the fixed example layout instead of random draws")
    parser.add_argument("--trace", action="store_true", help="Print every suffrage round")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    console.print("[bold]Suffrage Broker[/bold] — Scheduling batch...\n")

    tasks, resources = build_scenario(args)
    print_scenario_summary(tasks, resources)

    scheduler = get_scheduler(args.scheduler, trace=args.trace)
    try:
        result = scheduler.schedule(tasks, resources)
    except SchedulingError as e:
        logger.error(f"Scheduling rejected: {e}")
        sys.exit(1)

    if result.trace:
        print_trace(result.trace)

    simulator = DispatchSimulator(tasks, resources, result)
    metrics = simulator.run()
    metrics.print_task_records(list(simulator.records.values()), console)
    metrics.print_report(console)

    console.print(
        f"\n[dim]Processed {len(simulator.event_log)} events, "
        f"makespan {metrics.report.makespan:.2f}[/dim]"
    )


if __name__ == "__main__":
    main()
