# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer

from taskledger.model.filter import TaskFilter
from taskledger.service.stats import period_summary, summarize
from taskledger.terminal.engine import get_lifecycle
from taskledger.terminal.parse import parse_date
from taskledger.view.stats import period_view, summary_view


def stats(
    date_start: Annotated[
        Optional[pendulum.Date],
        typer.Option("--from", "-f", parser=parse_date),
    ] = None,
    date_end: Annotated[
        Optional[pendulum.Date],
        typer.Option("--to", "-t", parser=parse_date),
    ] = None,
    per_day: Annotated[bool, typer.Option("--per-day", "-pd")] = False,
) -> None:
    """Counters over the tasks scheduled in a date range (all tasks by default)."""
    filter: TaskFilter = {}
    if date_start is not None:
        filter["date_start"] = date_start
    if date_end is not None:
        filter["date_end"] = date_end

    tasks = get_lifecycle().store.snapshot(filter)
    summary_view("stats", summarize(tasks))
    if per_day:
        period_view(period_summary(tasks))
