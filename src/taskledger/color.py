# SPDX-License-Identifier: MIT

from taskledger.model.task import TaskPriority, TaskStatus

# Sealed tasks are dimmed in list views
CONCLUDED_TASK_COLOR = "bright_black"

STATUS_COLORS: dict[TaskStatus, str] = {
    "pending": "white",
    "completed": "green",
    "not-done": "red",
    "forwarded-date": "yellow",
    "forwarded-person": "yellow",
}

PRIORITY_COLORS: dict[TaskPriority, str] = {
    "none": "white",
    "priority": "dark_orange",
    "extreme": "bold red",
}


def colorize(value: str, color: str) -> str:
    return f"[{color}]{value}[/{color}]"
