# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from taskledger.model.task import Task, TaskTimeInvestment
from taskledger.service.ledger import has_not_done_record, is_definitive, is_forwarded

TIME_INVESTMENT_MINUTES: dict[TaskTimeInvestment, int] = {
    "custom-5": 5,
    "custom-30": 30,
    "low": 15,
    "medium": 60,
    "high": 120,
    "custom-4h": 240,
    "custom-8h": 480,
}


class TaskSummary(TypedDict):
    total: int
    completed: int
    not_done: int
    not_done_ever: int
    pending: int
    forwarded: int
    concluded: int
    definitive: int
    delegated: int
    completion_rate: int
    average_forwards: float
    total_minutes: int


class DaySummary(TypedDict):
    date: pendulum.Date
    total: int
    completed: int
    completion_rate: int


class PeriodSummary(TypedDict):
    start: Optional[pendulum.Date]
    end: Optional[pendulum.Date]
    days: list[DaySummary]
    average_tasks_per_day: float
    average_completion_rate: float


def percentage(part: int, total: int) -> int:
    if total == 0:
        return 0
    return int(part * 100 / total + 0.5)


def estimated_minutes(task: Task) -> int:
    if task["time_investment"] == "custom":
        return task["custom_time_minutes"] or 0
    return TIME_INVESTMENT_MINUTES.get(task["time_investment"], 0)


def summarize(tasks: list[Task]) -> TaskSummary:
    total = len(tasks)
    completed = len([task for task in tasks if task["status"] == "completed"])
    return {
        "total": total,
        "completed": completed,
        "not_done": len([task for task in tasks if task["status"] == "not-done"]),
        "not_done_ever": len([task for task in tasks if has_not_done_record(task)]),
        "pending": len([task for task in tasks if task["status"] == "pending"]),
        "forwarded": len([task for task in tasks if is_forwarded(task)]),
        "concluded": len([task for task in tasks if task["is_concluded"]]),
        "definitive": len([task for task in tasks if is_definitive(task)]),
        "delegated": len(
            [
                task
                for task in tasks
                if task["type"] == "delegated-task"
                or task["assigned_person_id"] is not None
            ]
        ),
        "completion_rate": percentage(completed, total),
        "average_forwards": (
            sum(task["forward_count"] for task in tasks) / total if total > 0 else 0.0
        ),
        "total_minutes": sum(estimated_minutes(task) for task in tasks),
    }


def period_summary(tasks: list[Task]) -> PeriodSummary:
    """Per scheduled day totals, in date order."""
    by_date: dict[pendulum.Date, list[Task]] = {}
    for task in tasks:
        by_date.setdefault(task["scheduled_date"], []).append(task)

    days: list[DaySummary] = []
    for date in sorted(by_date):
        day_tasks = by_date[date]
        completed = len([task for task in day_tasks if task["status"] == "completed"])
        days.append(
            {
                "date": date,
                "total": len(day_tasks),
                "completed": completed,
                "completion_rate": percentage(completed, len(day_tasks)),
            }
        )

    return {
        "start": days[0]["date"] if len(days) > 0 else None,
        "end": days[-1]["date"] if len(days) > 0 else None,
        "days": days,
        "average_tasks_per_day": len(tasks) / len(days) if len(days) > 0 else 0.0,
        "average_completion_rate": (
            sum(day["completion_rate"] for day in days) / len(days)
            if len(days) > 0
            else 0.0
        ),
    }
