"""Metrics Collector — measures how good a task-to-resource binding turned out."""

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from broker.models.task import TaskRecord, TaskStatus
from broker.models.resource import Resource


@dataclass
class MetricsReport:
    """Container for all computed metrics."""
    scheduler_name: str = ""
    total_tasks: int = 0
    tasks_completed: int = 0
    makespan: float = 0.0
    flowtime: float = 0.0
    avg_completion_time: float = 0.0
    throughput: float = 0.0
    avg_resource_utilization: float = 0.0
    load_imbalance: float = 0.0
    per_resource_busy_time: dict[int, float] = field(default_factory=dict)
    per_resource_utilization: dict[int, float] = field(default_factory=dict)
    per_resource_tasks: dict[int, int] = field(default_factory=dict)


class MetricsCollector:
    """Computes and reports scheduling performance metrics."""

    def __init__(self):
        self.report: Optional[MetricsReport] = None

    def calculate(
        self,
        records: list[TaskRecord],
        resources: list[Resource],
        scheduler_name: str,
    ) -> MetricsReport:
        """Compute all metrics from final task records."""
        report = MetricsReport(
            scheduler_name=scheduler_name,
            total_tasks=len(records),
        )

        completed = [r for r in records if r.status == TaskStatus.COMPLETED]
        report.tasks_completed = len(completed)

        finish_times = [r.finish_time for r in completed if r.finish_time is not None]
        if finish_times:
            report.makespan = max(finish_times)
            report.flowtime = sum(finish_times)
            report.avg_completion_time = report.flowtime / len(finish_times)

        if report.makespan > 0:
            report.throughput = report.tasks_completed / report.makespan

        # Per-resource busy time: sum of execution times of its tasks
        for resource in resources:
            mine = [r for r in completed if r.resource_id == resource.id]
            busy = sum(r.execution_time for r in mine if r.execution_time is not None)
            report.per_resource_busy_time[resource.id] = busy
            report.per_resource_tasks[resource.id] = len(mine)
            report.per_resource_utilization[resource.id] = (
                min(1.0, busy / report.makespan) if report.makespan > 0 else 0.0
            )

        if resources:
            report.avg_resource_utilization = (
                sum(report.per_resource_utilization.values()) / len(resources)
            )
            busy_times = list(report.per_resource_busy_time.values())
            mean_busy = sum(busy_times) / len(busy_times)
            if mean_busy > 0:
                report.load_imbalance = (max(busy_times) - min(busy_times)) / mean_busy

        self.report = report
        return report

    def print_report(self, console: Optional[Console] = None) -> None:
        """Print formatted metrics report."""
        if console is None:
            console = Console()
        if self.report is None:
            console.print("No metrics calculated yet. Run calculate() first.")
            return

        r = self.report
        console.print(Panel(
            f"[bold cyan]Suffrage Broker — Dispatch Report[/bold cyan]\n"
            f"Scheduler: [bold yellow]{r.scheduler_name}[/bold yellow]",
            border_style="cyan",
        ))

        perf_table = Table(title="Schedule Quality", border_style="green")
        perf_table.add_column("Metric", style="bold")
        perf_table.add_column("Value", justify="right")
        perf_table.add_row("Total Tasks", str(r.total_tasks))
        perf_table.add_row("Completed", f"[green]{r.tasks_completed}[/green]")
        perf_table.add_row("Makespan", f"{r.makespan:.2f}")
        perf_table.add_row("Flowtime", f"{r.flowtime:.2f}")
        perf_table.add_row("Avg Completion Time", f"{r.avg_completion_time:.2f}")
        perf_table.add_row("Throughput (tasks/time)", f"{r.throughput:.4f}")
        perf_table.add_row(
            "Load Imbalance",
            f"[{'red' if r.load_imbalance > 0.5 else 'green'}]{r.load_imbalance:.2f}[/]"
        )
        console.print(perf_table)

        if r.per_resource_utilization:
            resource_table = Table(title="Resource Utilization", border_style="magenta")
            resource_table.add_column("Resource", style="bold")
            resource_table.add_column("Tasks", justify="right")
            resource_table.add_column("Busy", justify="right")
            resource_table.add_column("Utilization", justify="right")
            for resource_id, util in sorted(r.per_resource_utilization.items()):
                bar_len = int(util * 20)
                bar = "█" * bar_len + "░" * (20 - bar_len)
                resource_table.add_row(
                    str(resource_id),
                    str(r.per_resource_tasks[resource_id]),
                    f"{r.per_resource_busy_time[resource_id]:.2f}",
                    f"{bar} {util:.1%}",
                )
            resource_table.add_row(
                "[bold]Average[/bold]", "", "",
                f"[bold]{r.avg_resource_utilization:.1%}[/bold]",
            )
            console.print(resource_table)

    def print_task_records(
        self, records: list[TaskRecord], console: Optional[Console] = None
    ) -> None:
        """Print one row per task: status, resource, execution, start and finish."""
        if console is None:
            console = Console()
        table = Table(title="Task Output", border_style="blue")
        for column in ("Task", "Status", "Resource", "Time", "Start", "Finish"):
            table.add_column(column, justify="right")
        for rec in sorted(records, key=lambda r: (r.finish_time is None, r.finish_time or 0.0)):
            table.add_row(
                str(rec.task_id),
                rec.status.value,
                str(rec.resource_id),
                f"{rec.execution_time:.2f}" if rec.execution_time is not None else "-",
                f"{rec.start_time:.2f}" if rec.start_time is not None else "-",
                f"{rec.finish_time:.2f}" if rec.finish_time is not None else "-",
            )
        console.print(table)
