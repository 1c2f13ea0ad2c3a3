# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from taskledger.service.stats import PeriodSummary, TaskSummary, percentage
from taskledger.time import date_to_display_str
from taskledger.view.header import header


def summary_view(report_name: str, summary: TaskSummary) -> None:
    header(report_name)

    table = Table(box=box.SIMPLE)
    table.add_column("metric")
    table.add_column("value", justify="right")
    table.add_column("%", justify="right")

    total = summary["total"]
    for label, key in (
        ("total", "total"),
        ("done", "completed"),
        ("not done", "not_done"),
        ("not done at least once", "not_done_ever"),
        ("pending", "pending"),
        ("forwarded", "forwarded"),
        ("definitive", "definitive"),
        ("concluded", "concluded"),
        ("delegated", "delegated"),
    ):
        value = summary[key]  # type: ignore[literal-required]
        table.add_row(label, str(value), str(percentage(value, total)))

    table.add_row("completion rate", f"{summary['completion_rate']}%", "")
    table.add_row("average forwards", f"{summary['average_forwards']:.2f}", "")
    table.add_row("estimated minutes", str(summary["total_minutes"]), "")

    console = Console()
    console.print(table)


def period_view(period: PeriodSummary) -> None:
    if len(period["days"]) == 0:
        return

    table = Table(box=box.SIMPLE, title="per day")
    table.add_column("date")
    table.add_column("tasks", justify="right")
    table.add_column("done", justify="right")
    table.add_column("rate", justify="right")
    for day in period["days"]:
        table.add_row(
            date_to_display_str(day["date"]),
            str(day["total"]),
            str(day["completed"]),
            f"{day['completion_rate']}%",
        )

    console = Console()
    console.print(table)
    console.print(
        f" average {period['average_tasks_per_day']:.1f} task(s) per day,"
        f" {period['average_completion_rate']:.0f}% done"
    )
