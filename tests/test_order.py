# tests/test_order.py

from __future__ import annotations

from collections.abc import Callable

import pendulum

from taskledger.model.task import Task
from taskledger.service.order import (
    apply_adjustments,
    insert_reordering,
    move_reordering,
    next_available_order,
    normalize_sequence,
)
from taskledger.service.store import TaskStore

from .conftest import new_task

DAY = pendulum.Date(2024, 1, 1)


def day_tasks(*orders: int, date: pendulum.Date = DAY) -> list[Task]:
    tasks = []
    for order in orders:
        task = new_task(f"order {order}", date)
        task["id"] = f"task-{order}"
        task["order"] = order
        tasks.append(task)
    return tasks


def moves(adjustments: list) -> list[tuple[str, int, int]]:
    return [
        (adjustment["task_id"], adjustment["old_order"], adjustment["new_order"])
        for adjustment in adjustments
    ]


def test_next_available_order() -> None:
    assert next_available_order([], DAY) == 1
    tasks = day_tasks(1, 4) + day_tasks(9, date=pendulum.Date(2024, 1, 2))
    assert next_available_order(tasks, DAY) == 5


def test_insert_shifts_tasks_at_and_after_position() -> None:
    tasks = day_tasks(1, 2, 3)

    assert moves(insert_reordering(tasks, DAY, 2)) == [
        ("task-2", 2, 3),
        ("task-3", 3, 4),
    ]


def test_insert_ignores_other_days_and_excluded_task() -> None:
    tasks = day_tasks(1, 2) + day_tasks(3, date=pendulum.Date(2024, 1, 2))

    assert moves(insert_reordering(tasks, DAY, 1, exclude_id="task-1")) == [
        ("task-2", 2, 3)
    ]


def test_move_down() -> None:
    tasks = day_tasks(1, 2, 3, 4)

    assert moves(move_reordering(tasks, DAY, "task-1", 3)) == [
        ("task-2", 2, 1),
        ("task-3", 3, 2),
    ]


def test_move_up() -> None:
    tasks = day_tasks(1, 2, 3, 4)

    assert moves(move_reordering(tasks, DAY, "task-4", 2)) == [
        ("task-2", 2, 3),
        ("task-3", 3, 4),
    ]


def test_move_to_same_position_or_unknown_task() -> None:
    tasks = day_tasks(1, 2)

    assert move_reordering(tasks, DAY, "task-2", 2) == []
    assert move_reordering(tasks, DAY, "missing", 1) == []


def test_normalize_closes_gaps() -> None:
    tasks = day_tasks(2, 5, 9)

    assert moves(normalize_sequence(tasks, DAY)) == [
        ("task-2", 2, 1),
        ("task-5", 5, 2),
        ("task-9", 9, 3),
    ]
    assert normalize_sequence(day_tasks(1, 2), DAY) == []


def test_apply_adjustments_writes_orders(
    store: TaskStore, add_task: Callable[..., Task]
) -> None:
    first = add_task("first", order=1)
    second = add_task("second", order=2)

    apply_adjustments(store, insert_reordering(store.snapshot(), DAY, 1))

    assert store.get(first["id"])["order"] == 2  # type: ignore[arg-type]
    assert store.get(second["id"])["order"] == 3  # type: ignore[arg-type]
