# SPDX-License-Identifier: MIT

"""Expanding a routine into one task per occurrence."""

import logging
from copy import deepcopy
from typing import Optional

import pendulum

from taskledger.model.task import RoutineCycle, Task

logger = logging.getLogger(__name__)

MAX_OCCURRENCES = 100

CYCLE_STEPS: dict[RoutineCycle, dict[str, int]] = {
    "daily": {"days": 1},
    "weekly": {"weeks": 1},
    "monthly": {"months": 1},
    "quarterly": {"months": 3},
    "biannual": {"months": 6},
    "annual": {"years": 1},
}


def generate_routine_dates(
    start: pendulum.Date,
    end: Optional[pendulum.Date],
    cycle: RoutineCycle,
    include_weekends: bool = True,
) -> list[pendulum.Date]:
    """
    Occurrence dates from ``start`` through ``end`` (inclusive).

    Without an end the routine runs for one year. At most ``MAX_OCCURRENCES``
    steps are taken; skipped weekend days count towards that limit.
    """
    if end is None:
        end = start.add(years=1)
    step = CYCLE_STEPS[cycle]

    dates: list[pendulum.Date] = []
    current = start
    count = 0
    while current <= end and count < MAX_OCCURRENCES:
        is_weekend = current.day_of_week in (pendulum.SATURDAY, pendulum.SUNDAY)
        if include_weekends or not is_weekend:
            dates.append(current)
        current = current.add(**step)
        count += 1
    return dates


def generate_routine_tasks(
    task: Task,
    cycle: RoutineCycle,
    start: pendulum.Date,
    end: Optional[pendulum.Date] = None,
    include_weekends: bool = True,
) -> list[Task]:
    dates = generate_routine_dates(start, end, cycle, include_weekends)
    tasks: list[Task] = []
    for index, date in enumerate(dates):
        occurrence = deepcopy(task)
        occurrence["id"] = None
        occurrence["scheduled_date"] = date
        if len(dates) > 1:
            occurrence["title"] = f"{task['title']} (#{index + 1})"
        occurrence["order"] = task["order"] + index
        occurrence["status"] = "pending"
        occurrence["completion_history"] = []
        occurrence["forward_history"] = []
        occurrence["forward_count"] = 0
        occurrence["delivery_dates"] = []
        occurrence["is_concluded"] = False
        occurrence["concluded_at"] = None
        occurrence["is_routine"] = True
        occurrence["routine_cycle"] = cycle
        tasks.append(occurrence)
    logger.debug("routine %s expanded to %d task(s)", cycle, len(tasks))
    return tasks
