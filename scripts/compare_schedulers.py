"""Compare schedulers side-by-side on the same batch.

Run from a checkout after `pip install -e .`, which puts `broker` on the path.

Usage:
    python scripts/compare_schedulers.py --tasks 100 --resources 5 --seed 42
"""

import argparse
import sys
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.table import Table

from broker.errors import SchedulingError
from broker.metrics.collector import MetricsReport
from broker.schedulers.base import BaseScheduler
from broker.schedulers.round_robin import RoundRobinScheduler
from broker.schedulers.suffrage import SuffrageScheduler
from broker.simulator.engine import DispatchSimulator
from broker.simulator.generator import ScenarioGenerator
from broker.simulator.scenario import load_scenario

console = Console()


def run_with_scheduler(scheduler: BaseScheduler, tasks, resources) -> MetricsReport:
    """Schedule and replay a batch with a given scheduler, return the metrics report."""
    result = scheduler.schedule(tasks, resources)
    metrics = DispatchSimulator(tasks, resources, result).run()
    return metrics.report


def print_comparison(reports: dict[str, MetricsReport]):
    """Print side-by-side comparison of scheduler runs."""
    names = list(reports.keys())

    def fmt_delta(new, baseline, lower_better=True):
        if baseline == 0:
            return ""
        pct = ((new - baseline) / baseline) * 100
        sign = "+" if pct > 0 else ""
        color = "red" if (pct > 0 and lower_better) or (pct < 0 and not lower_better) else "green"
        return f"[{color}]{sign}{pct:.1f}%[/]"

    metric_defs = [
        ("Makespan", lambda r: r.makespan, True),
        ("Flowtime", lambda r: r.flowtime, True),
        ("Avg Completion Time", lambda r: r.avg_completion_time, True),
        ("Throughput", lambda r: r.throughput, False),
        ("Load Imbalance", lambda r: r.load_imbalance, True),
        ("Avg Utilization", lambda r: r.avg_resource_utilization, False),
    ]

    def fmt_val(val, is_rate=False):
        if is_rate:
            return f"{val:.1%}"
        return f"{val:.4f}" if val < 1 else f"{val:.2f}"

    title = " vs ".join(names)
    table = Table(title=title, border_style="cyan")
    table.add_column("Metric", style="bold")
    for name in names:
        table.add_column(name, justify="right")
    for name in names[1:]:
        table.add_column(f"Δ vs {names[0]}", justify="right")

    for metric_name, extract_fn, lower_better in metric_defs:
        is_rate = metric_name == "Avg Utilization"
        vals = {n: extract_fn(reports[n]) for n in names}
        row = [metric_name]
        row.extend(fmt_val(vals[n], is_rate=is_rate) for n in names)
        row.extend(fmt_delta(vals[n], vals[names[0]], lower_better) for n in names[1:])
        table.add_row(*row)

    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="Compare Round-Robin vs Suffrage schedulers")
    parser.add_argument("--tasks", type=int, default=100, help="Number of tasks (default: 100)")
    parser.add_argument("--resources", type=int, default=5, help="Number of resources (default: 5)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--scenario", type=str, default=None, help="YAML/JSON scenario file")
    parser.add_argument("--example", action="store_true",
                        help="Use the fixed example layout instead of random draws")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "WARNING")

    if args.scenario:
        scenario = load_scenario(Path(args.scenario))
        tasks, resources = scenario.tasks, scenario.resources
    elif args.example:
        tasks, resources = ScenarioGenerator.extended_example(args.tasks, args.resources)
    else:
        gen = ScenarioGenerator(seed=args.seed)
        tasks = gen.generate_tasks(num_tasks=args.tasks)
        resources = gen.generate_resources(num_resources=args.resources)

    console.print(f"[bold]Scenario:[/bold] {len(tasks)} tasks, {len(resources)} resources, seed={args.seed}\n")

    try:
        reports = {
            "Round-Robin": run_with_scheduler(RoundRobinScheduler(), tasks, resources),
            "Suffrage": run_with_scheduler(SuffrageScheduler(), tasks, resources),
        }
    except SchedulingError as e:
        logger.error(f"Scheduling rejected: {e}")
        sys.exit(1)

    print_comparison(reports)


if __name__ == "__main__":
    main()
