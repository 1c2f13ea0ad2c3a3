# SPDX-License-Identifier: MIT

from typing import Literal

from taskledger.model.task import Task

SortOption = Literal["order", "priority", "title", "type", "time_investment"]

PRIORITY_RANK = {"extreme": 3, "priority": 2, "none": 1}
TIME_INVESTMENT_RANK = {
    "custom-5": 1,
    "custom-30": 2,
    "low": 3,
    "medium": 4,
    "high": 5,
    "custom-4h": 6,
    "custom-8h": 7,
    "custom": 8,
}


def sort_tasks(tasks: list[Task], sort_by: SortOption = "order") -> list[Task]:
    """Return a new list; ties keep their incoming order."""
    if sort_by == "priority":
        return sorted(tasks, key=lambda task: -PRIORITY_RANK.get(task["priority"], 0))
    if sort_by == "title":
        return sorted(tasks, key=lambda task: task["title"].casefold())
    if sort_by == "type":
        return sorted(tasks, key=lambda task: task["type"])
    if sort_by == "time_investment":
        return sorted(
            tasks,
            key=lambda task: TIME_INVESTMENT_RANK.get(task["time_investment"], 0),
        )
    return sorted(tasks, key=lambda task: (task["scheduled_date"], task["order"]))
