# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from taskledger.color import STATUS_COLORS, colorize
from taskledger.model.entity_id import EntityId
from taskledger.model.task import Task
from taskledger.service.daily_close import DailyCloseStats
from taskledger.time import date_to_display_long_str
from taskledger.view.header import header
from taskledger.view.task import short_task_id, task_status_text


def daily_review_view(stats: DailyCloseStats) -> None:
    header(f"close {date_to_display_long_str(stats['date'])}: review")

    table = Table(box=box.SIMPLE)
    table.add_column("total", justify="right")
    table.add_column(colorize("done", STATUS_COLORS["completed"]), justify="right")
    table.add_column(colorize("forwarded", STATUS_COLORS["forwarded-date"]), justify="right")
    table.add_column(colorize("not done", STATUS_COLORS["not-done"]), justify="right")
    table.add_column("pending", justify="right")
    table.add_column("completion", justify="right")
    table.add_row(
        str(stats["total"]),
        str(stats["completed"]),
        str(stats["forwarded"]),
        str(stats["not_done"]),
        str(stats["pending"]),
        f"{stats['completion_rate']}%",
    )

    console = Console()
    console.print(table)


def daily_detail_view(tasks: list[Task], unlocked_ids: set[EntityId]) -> None:
    """Tasks of the day; the last column shows whether reschedule / conclude is open."""
    table = Table(box=box.SIMPLE)
    table.add_column("id")
    table.add_column("title")
    table.add_column("status")
    table.add_column("reschedule / conclude")
    for task in tasks:
        unlocked = task["id"] is not None and task["id"] in unlocked_ids
        table.add_row(
            short_task_id(task),
            task["title"],
            task_status_text(task),
            "open" if unlocked else colorize("locked", "bright_black"),
        )

    console = Console()
    console.print(table)
