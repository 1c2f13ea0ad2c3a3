# SPDX-License-Identifier: MIT

"""
Per-day task ordering.

Orders are 1-based positions among the tasks scheduled on the same day; 0
means "no order". The functions here only compute the adjustments; writing
them goes through the store.
"""

import logging
from typing import Optional, TypedDict

import pendulum

from taskledger.model.entity_id import EntityId
from taskledger.model.task import Task
from taskledger.service.store import TaskStore

logger = logging.getLogger(__name__)


class OrderAdjustment(TypedDict):
    task_id: EntityId
    old_order: int
    new_order: int


def __tasks_for_day(
    tasks: list[Task], date: pendulum.Date, exclude_id: Optional[EntityId] = None
) -> list[Task]:
    return sorted(
        [
            task
            for task in tasks
            if task["scheduled_date"] == date
            and task["id"] is not None
            and task["id"] != exclude_id
        ],
        key=lambda task: task["order"],
    )


def next_available_order(tasks: list[Task], date: pendulum.Date) -> int:
    return max([task["order"] for task in __tasks_for_day(tasks, date)] + [0]) + 1


def insert_reordering(
    tasks: list[Task],
    date: pendulum.Date,
    position: int,
    exclude_id: Optional[EntityId] = None,
) -> list[OrderAdjustment]:
    """Shift every task at or after ``position`` one place down."""
    return [
        {
            "task_id": task["id"],  # type: ignore[typeddict-item]
            "old_order": task["order"],
            "new_order": task["order"] + 1,
        }
        for task in __tasks_for_day(tasks, date, exclude_id)
        if task["order"] >= position
    ]


def move_reordering(
    tasks: list[Task], date: pendulum.Date, task_id: EntityId, position: int
) -> list[OrderAdjustment]:
    """
    Adjustments for the other tasks of the day when ``task_id`` moves to
    ``position``. The moving task itself is not included.
    """
    day_tasks = __tasks_for_day(tasks, date)
    moving = next((task for task in day_tasks if task["id"] == task_id), None)
    if moving is None:
        return []
    old_position = moving["order"]

    adjustments: list[OrderAdjustment] = []
    for task in day_tasks:
        if task["id"] == task_id:
            continue
        order = task["order"]
        if position > old_position and old_position < order <= position:
            new_order = order - 1
        elif position < old_position and position <= order < old_position:
            new_order = order + 1
        else:
            continue
        adjustments.append(
            {
                "task_id": task["id"],  # type: ignore[typeddict-item]
                "old_order": order,
                "new_order": new_order,
            }
        )
    return adjustments


def normalize_sequence(tasks: list[Task], date: pendulum.Date) -> list[OrderAdjustment]:
    """Renumber the day's tasks 1..n, closing gaps."""
    adjustments: list[OrderAdjustment] = []
    for index, task in enumerate(__tasks_for_day(tasks, date)):
        if task["order"] != index + 1:
            adjustments.append(
                {
                    "task_id": task["id"],  # type: ignore[typeddict-item]
                    "old_order": task["order"],
                    "new_order": index + 1,
                }
            )
    return adjustments


def apply_adjustments(store: TaskStore, adjustments: list[OrderAdjustment]) -> None:
    for adjustment in adjustments:
        store.update(adjustment["task_id"], {"order": adjustment["new_order"]})
    if len(adjustments) > 0:
        logger.info("reordered %d task(s)", len(adjustments))
