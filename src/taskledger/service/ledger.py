# SPDX-License-Identifier: MIT

"""
Read-only queries over a task's completion and forward histories.

Nothing here is persisted; every answer is recomputed from the two lists,
which makes the histories the single source of truth for statistics.
"""

from typing import Optional

import pendulum

from taskledger.model.task import CompletionEntry, CompletionRecord, Task
from taskledger.time import local_date


def last_completion(task: Task) -> Optional[CompletionEntry]:
    if len(task["completion_history"]) == 0:
        return None
    return task["completion_history"][-1]


def last_decisive_completion(task: Task) -> Optional[CompletionRecord]:
    """The latest done / not-done record, unless a revert came after it."""
    entry = last_completion(task)
    if entry is None or entry["status"] == "reverted":
        return None
    return entry


def was_rescheduled_from_date(task: Task, date: pendulum.Date) -> bool:
    return any(record["original_date"] == date for record in task["forward_history"])


def is_definitive(task: Task) -> bool:
    """Completed and never rescheduled away from its own scheduled date."""
    return task["status"] == "completed" and not was_rescheduled_from_date(
        task, task["scheduled_date"]
    )


def is_forwarded(task: Task) -> bool:
    return task["forward_count"] > 0 or len(task["forward_history"]) > 0


def was_rescheduled_on(task: Task, day: pendulum.Date) -> bool:
    return any(
        local_date(record["forwarded_at"]) == day for record in task["forward_history"]
    )


def has_not_done_record(task: Task) -> bool:
    return any(entry["status"] == "not-done" for entry in task["completion_history"])


def outgoing_forward_count(task: Task) -> int:
    """
    Forward records written when this task was rescheduled away.

    A successor's first record points back at its predecessor and is not
    counted.
    """
    records = task["forward_history"]
    if task["cloned_from_id"] is not None:
        records = records[1:]
    return len(records)
