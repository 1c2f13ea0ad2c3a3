# SPDX-License-Identifier: MIT

"""
Transition rules for a single task.

Every rule is a pure function of the task's current fields. It returns the
partial update to persist, or ``None`` when the call has no effect. No rule
raises for an illegal call: a duplicate or pointless action is simply a
no-op. ``status`` is never set directly; it is rebuilt from the completion
history with ``derive_status`` whenever the history changes.
"""

from typing import Optional

import pendulum

from taskledger.model.entity_id import EntityId
from taskledger.model.task import (
    CompletionEntry,
    CompletionOutcome,
    CompletionRecord,
    RevertRecord,
    Task,
    TaskStatus,
    TaskUpdate,
)
from taskledger.service.ledger import last_completion, last_decisive_completion
from taskledger.time import is_same_local_day, now_utc


def derive_status(
    completion_history: list[CompletionEntry], fallback: TaskStatus = "pending"
) -> TaskStatus:
    """
    The status implied by the latest history entry.

    A revert or an empty history means pending. ``fallback`` is returned for an
    empty history so rows carrying a legacy forwarded status keep it.
    """
    if len(completion_history) == 0:
        return fallback
    latest = completion_history[-1]
    if latest["status"] == "reverted":
        return "pending"
    return latest["status"]


def record_completion(
    task: Task, outcome: CompletionOutcome, now: Optional[pendulum.DateTime] = None
) -> Optional[TaskUpdate]:
    now = now if now is not None else now_utc()

    latest = last_completion(task)
    if (
        latest is not None
        and latest["status"] == outcome
        and is_same_local_day(latest["completed_at"], now)
    ):
        return None

    record: CompletionRecord = {
        "completed_at": now,
        "status": outcome,
        "date": task["scheduled_date"],
        "was_forwarded": len(task["forward_history"]) > 0,
    }
    completion_history = task["completion_history"] + [record]
    return {
        "completion_history": completion_history,
        "status": derive_status(completion_history),
    }


def __revert_latest(
    task: Task, now: pendulum.DateTime
) -> Optional[list[CompletionEntry]]:
    latest = last_decisive_completion(task)
    if latest is None:
        return None
    revert: RevertRecord = {
        "completed_at": now,
        "status": "reverted",
        "date": task["scheduled_date"],
        "was_forwarded": len(task["forward_history"]) > 0,
        "reverted_status": latest["status"],
    }
    return task["completion_history"] + [revert]


def set_pending(
    task: Task, now: Optional[pendulum.DateTime] = None
) -> Optional[TaskUpdate]:
    """Undo the latest done / not-done click by appending a revert record."""
    now = now if now is not None else now_utc()

    completion_history = __revert_latest(task, now)
    if completion_history is None:
        if task["status"] == "pending":
            return None
        return {"status": "pending"}
    return {
        "completion_history": completion_history,
        "status": derive_status(completion_history),
    }


def conclude(task: Task, now: Optional[pendulum.DateTime] = None) -> Optional[TaskUpdate]:
    if task["is_concluded"]:
        return None
    return {
        "is_concluded": True,
        "concluded_at": now if now is not None else now_utc(),
    }


def unconclude(
    task: Task, now: Optional[pendulum.DateTime] = None
) -> Optional[TaskUpdate]:
    """Soft reopen: lift the seal and bring the status back to pending."""
    if not task["is_concluded"]:
        return None
    now = now if now is not None else now_utc()

    update: TaskUpdate = {"is_concluded": False, "concluded_at": None}
    completion_history = __revert_latest(task, now)
    if completion_history is not None:
        update["completion_history"] = completion_history
    update["status"] = "pending"
    return update


def delegate(task: Task, person_id: Optional[EntityId]) -> Optional[TaskUpdate]:
    if task["assigned_person_id"] == person_id:
        return None
    return {"assigned_person_id": person_id}
