# SPDX-License-Identifier: MIT

"""
Detecting reschedules that were only half applied.

A reschedule is two separate writes: the predecessor gets a forward record
and is sealed, then the successor is inserted with ``cloned_from_id``
pointing back. Either write can be missing after a failure. This scan finds
both shapes and records each one once in the reconciliation ledger.

The two shapes are not symmetric under deletion. A sealed task whose
successor was deleted later looks exactly like a failed successor insert,
so it is still reported as an orphaned seal and stays open until the
task is reopened or has a successor again. A successor whose predecessor
was deleted leaves nothing to seal and is not reported.
"""

import logging
from typing import Optional

import pendulum

from taskledger.model.entity_id import EntityId
from taskledger.model.reconciliation import ReconciliationKind, ReconciliationRecord
from taskledger.model.task import Task
from taskledger.repository.reconciliation import ReconciliationRepository
from taskledger.service.ledger import outgoing_forward_count
from taskledger.time import now_utc

logger = logging.getLogger(__name__)


def __successor_counts(tasks: list[Task]) -> dict[EntityId, int]:
    counts: dict[EntityId, int] = {}
    for task in tasks:
        if task["cloned_from_id"] is not None:
            counts[task["cloned_from_id"]] = counts.get(task["cloned_from_id"], 0) + 1
    return counts


def find_inconsistencies(
    tasks: list[Task],
) -> list[tuple[Task, ReconciliationKind, str]]:
    successor_counts = __successor_counts(tasks)
    tasks_by_id = {task["id"]: task for task in tasks if task["id"] is not None}

    found: list[tuple[Task, ReconciliationKind, str]] = []
    for task in tasks:
        if task["id"] is None:
            continue

        forwards = outgoing_forward_count(task)
        successors = successor_counts.get(task["id"], 0)
        # a deleted successor counts as missing
        if task["is_concluded"] and forwards > successors:
            found.append(
                (
                    task,
                    "orphaned-seal",
                    f"{forwards} outgoing forward(s) but {successors} successor(s)",
                )
            )

        predecessor_id = task["cloned_from_id"]
        if predecessor_id is None:
            continue
        predecessor = tasks_by_id.get(predecessor_id)
        if predecessor is None:
            # a deleted predecessor is not a half-applied reschedule
            continue
        if outgoing_forward_count(predecessor) == 0:
            found.append(
                (
                    predecessor,
                    "unsealed-predecessor",
                    f"successor {task['id']} exists but the predecessor has no forward record",
                )
            )
    return found


def reconcile(
    tasks: list[Task],
    reconciliations: ReconciliationRepository,
    now: Optional[pendulum.DateTime] = None,
) -> list[ReconciliationRecord]:
    """
    Record new inconsistencies and resolve open records that no longer apply.

    Returns the records created by this scan.
    """
    now = now if now is not None else now_utc()
    found = find_inconsistencies(tasks)
    current = {(task["id"], kind) for task, kind, _ in found}

    for record in reconciliations.get_open_records():
        if (record["task_id"], record["kind"]) not in current and record["id"] is not None:
            logger.info(
                "reconciliation %s for task %s no longer applies",
                record["id"],
                record["task_id"],
            )
            reconciliations.resolve_record(record["id"])

    created: list[ReconciliationRecord] = []
    for task, kind, detail in found:
        task_id = task["id"]
        if task_id is None or reconciliations.has_open_record(task_id, kind):
            continue
        record: ReconciliationRecord = {
            "id": None,
            "owner_id": task["owner_id"],
            "task_id": task_id,
            "kind": kind,
            "detail": detail,
            "created": now,
            "resolved": None,
        }
        reconciliations.save_new_record(record)
        logger.warning("task %s needs reconciliation: %s", task_id, detail)
        created.append(record)
    return created
