# SPDX-License-Identifier: MIT

"""
Rescheduling a task onto a new date.

The original task is never moved or deleted. It gets a forward record and is
sealed (concluded), and a successor carrying its descriptive fields is
created on the new date. The two writes are separate repository requests.
When the successor cannot be created the seal is rolled back
(compensation); if that is disabled or fails too, the half-applied pair is
written to the reconciliation ledger for later repair.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypedDict

import pendulum

from taskledger.errors import (
    RescheduleError,
    RescheduleStateError,
    TaskLedgerError,
    TaskNotFoundError,
)
from taskledger.model.entity_id import EntityId
from taskledger.model.reconciliation import ReconciliationKind, ReconciliationRecord
from taskledger.model.task import ForwardRecord, Task, TaskUpdate
from taskledger.repository.reconciliation import ReconciliationRepository
from taskledger.service.bulk import BulkResult, run_bulk, unique_ids
from taskledger.service.store import TaskStore
from taskledger.time import date_to_display_str, next_business_day, now_utc

logger = logging.getLogger(__name__)

SINGLE_REASON = "rescheduled by user"
BULK_REASON = "bulk reschedule"


@dataclass(frozen=True)
class RescheduleOptions:
    keep_order: bool = True
    keep_checklist: bool = True
    compensate: bool = True
    reason: Optional[str] = None


class ReschedulePlan(TypedDict):
    seal: TaskUpdate
    rollback: TaskUpdate
    successor: Task


class RescheduleState(Enum):
    IDLE = "idle"
    DATE_PICKED = "date-picked"
    CONFIRMED = "confirmed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def received_reason(original_date: pendulum.Date) -> str:
    return f"received from {date_to_display_str(original_date)}"


def plan_reschedule(
    task: Task,
    new_date: pendulum.Date,
    options: RescheduleOptions = RescheduleOptions(),
    now: Optional[pendulum.DateTime] = None,
) -> ReschedulePlan:
    """Compute both writes without performing either."""
    now = now if now is not None else now_utc()

    forward_record: ForwardRecord = {
        "forwarded_at": now,
        "forwarded_to": None,
        "original_date": task["scheduled_date"],
        "new_date": new_date,
        "status_at_forward": task["status"],
        "reason": options.reason if options.reason is not None else SINGLE_REASON,
    }
    seal: TaskUpdate = {
        "forward_history": task["forward_history"] + [forward_record],
        "is_concluded": True,
        "concluded_at": now,
    }
    rollback: TaskUpdate = {
        "forward_history": deepcopy(task["forward_history"]),
        "is_concluded": task["is_concluded"],
        "concluded_at": task["concluded_at"],
    }

    successor = deepcopy(task)
    successor["id"] = None
    successor["cloned_from_id"] = task["id"]
    successor["scheduled_date"] = new_date
    successor["status"] = "pending"
    successor["forward_count"] = task["forward_count"] + 1
    successor["order"] = task["order"] if options.keep_order else 0
    if not options.keep_checklist:
        for sub_item in successor["sub_items"]:
            sub_item["completed"] = False
    successor["forward_history"] = [
        {
            "forwarded_at": now,
            "forwarded_to": None,
            "original_date": task["scheduled_date"],
            "new_date": new_date,
            "status_at_forward": "pending",
            "reason": received_reason(task["scheduled_date"]),
        }
    ]
    successor["completion_history"] = []
    successor["is_concluded"] = False
    successor["concluded_at"] = None
    successor["created"] = now
    successor["updated"] = now

    return {"seal": seal, "rollback": rollback, "successor": successor}


def __record_orphaned_seal(
    reconciliations: Optional[ReconciliationRepository],
    task: Task,
    kind: ReconciliationKind,
    detail: str,
) -> None:
    logger.error("task %s left inconsistent: %s", task["id"], detail)
    if reconciliations is None or task["id"] is None:
        return
    record: ReconciliationRecord = {
        "id": None,
        "owner_id": task["owner_id"],
        "task_id": task["id"],
        "kind": kind,
        "detail": detail,
        "created": now_utc(),
        "resolved": None,
    }
    reconciliations.save_new_record(record)


def reschedule_task(
    store: TaskStore,
    task: Task,
    new_date: pendulum.Date,
    options: RescheduleOptions = RescheduleOptions(),
    reconciliations: Optional[ReconciliationRepository] = None,
    now: Optional[pendulum.DateTime] = None,
) -> Task:
    """
    Seal ``task`` and create its successor on ``new_date``.

    Returns the successor. Raises RescheduleError when the successor was not
    created; ``sealed`` on the error tells whether the seal is still in place.
    """
    if task["id"] is None:
        raise RescheduleError("<unsaved>", "task has no id")
    plan = plan_reschedule(task, new_date, options, now)

    try:
        store.update(task["id"], plan["seal"])
    except TaskLedgerError as e:
        raise RescheduleError(task["id"], f"could not seal: {e}") from e

    try:
        successor = store.insert(plan["successor"])
    except TaskLedgerError as insert_error:
        if not options.compensate:
            __record_orphaned_seal(
                reconciliations,
                task,
                "orphaned-seal",
                f"sealed for {new_date.to_date_string()} but successor was not "
                f"created: {insert_error}",
            )
            raise RescheduleError(
                task["id"], f"could not create successor: {insert_error}", sealed=True
            ) from insert_error

        try:
            store.update(task["id"], plan["rollback"])
        except TaskLedgerError as rollback_error:
            __record_orphaned_seal(
                reconciliations,
                task,
                "orphaned-seal",
                f"successor for {new_date.to_date_string()} was not created "
                f"({insert_error}) and the seal could not be rolled back "
                f"({rollback_error})",
            )
            raise RescheduleError(
                task["id"], f"could not create successor: {insert_error}", sealed=True
            ) from insert_error

        logger.warning(
            "rolled back seal of task %s after failed successor insert", task["id"]
        )
        raise RescheduleError(
            task["id"], f"could not create successor: {insert_error}"
        ) from insert_error

    logger.info(
        "rescheduled task %s from %s to %s as %s",
        task["id"],
        task["scheduled_date"],
        new_date,
        successor["id"],
    )
    return successor


class RescheduleOperation:
    """
    One reschedule request for one or many tasks.

    Idle -> DatePicked -> Confirmed -> Succeeded | Failed. With several tasks
    each is read and attempted in turn; the operation only fails when none
    succeed.
    """

    def __init__(
        self,
        store: TaskStore,
        task_ids: list[EntityId],
        options: RescheduleOptions = RescheduleOptions(),
        reconciliations: Optional[ReconciliationRepository] = None,
        clock: Callable[[], pendulum.DateTime] = now_utc,
    ) -> None:
        self.store = store
        self.task_ids = unique_ids(task_ids)
        self.options = options
        self.reconciliations = reconciliations
        self.clock = clock
        self.state = RescheduleState.IDLE
        self.new_date: Optional[pendulum.Date] = None
        self.result: Optional[BulkResult] = None
        self.successors: list[Task] = []

    def suggested_date(self) -> Optional[pendulum.Date]:
        """Next business day after the first selected task that still exists."""
        for task_id in self.task_ids:
            try:
                task = self.store.get(task_id)
            except TaskNotFoundError:
                continue
            return next_business_day(task["scheduled_date"])
        return None

    def pick_date(self, new_date: pendulum.Date) -> None:
        if self.state not in (RescheduleState.IDLE, RescheduleState.DATE_PICKED):
            raise RescheduleStateError(f"cannot pick a date while {self.state.value}")
        self.new_date = new_date
        self.state = RescheduleState.DATE_PICKED

    def confirm(self) -> BulkResult:
        if self.state != RescheduleState.DATE_PICKED or self.new_date is None:
            raise RescheduleStateError(f"cannot confirm while {self.state.value}")
        self.state = RescheduleState.CONFIRMED
        new_date = self.new_date

        options = self.options
        if options.reason is None:
            reason = BULK_REASON if len(self.task_ids) > 1 else SINGLE_REASON
            options = RescheduleOptions(
                keep_order=options.keep_order,
                keep_checklist=options.keep_checklist,
                compensate=options.compensate,
                reason=reason,
            )

        def reschedule_one(task: Task) -> Task:
            successor = reschedule_task(
                self.store,
                task,
                new_date,
                options,
                self.reconciliations,
                self.clock(),
            )
            self.successors.append(successor)
            return successor

        self.result = run_bulk(self.task_ids, self.store.get, reschedule_one)
        if self.result["success_count"] > 0 or len(self.task_ids) == 0:
            self.state = RescheduleState.SUCCEEDED
        else:
            self.state = RescheduleState.FAILED
        return self.result
