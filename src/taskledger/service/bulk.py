# SPDX-License-Identifier: MIT

import logging
from typing import Any, Callable, TypedDict

from taskledger.model.entity_id import EntityId
from taskledger.model.task import Task
from taskledger.ports import NotificationSink

logger = logging.getLogger(__name__)

MAX_FAILED_TITLES = 3


class BulkFailure(TypedDict):
    id: EntityId
    title: str
    reason: str


class BulkResult(TypedDict):
    success_count: int
    failed: list[BulkFailure]


def unique_ids(task_ids: list[EntityId]) -> list[EntityId]:
    """``task_ids`` without repeats, first occurrence kept."""
    return list(dict.fromkeys(task_ids))


def run_bulk(
    task_ids: list[EntityId],
    load: Callable[[EntityId], Task],
    operation: Callable[[Task], Any],
) -> BulkResult:
    """
    Load each task and apply ``operation`` to it, in order.

    Every task is read right before it is processed, so a failure to load
    one (deleted elsewhere, unreadable row) is recorded like any other
    failure and the batch carries on. A repeated id is attempted once.
    Nothing is retried.
    """
    result: BulkResult = {"success_count": 0, "failed": []}
    for task_id in unique_ids(task_ids):
        title = task_id
        try:
            task = load(task_id)
            title = task["title"]
            operation(task)
        except Exception as e:
            logger.warning("bulk item %s failed: %s", task_id, e)
            result["failed"].append(
                {
                    "id": task_id,
                    "title": title,
                    "reason": str(e) or type(e).__name__,
                }
            )
        else:
            result["success_count"] += 1
    logger.info(
        "bulk run finished: %d succeeded, %d failed",
        result["success_count"],
        len(result["failed"]),
    )
    return result


def describe_failures(result: BulkResult) -> str:
    failed = result["failed"]
    titles = ", ".join(f"'{failure['title']}'" for failure in failed[:MAX_FAILED_TITLES])
    if len(failed) > MAX_FAILED_TITLES:
        titles += f" and {len(failed) - MAX_FAILED_TITLES} more"
    plural = "s" if len(failed) != 1 else ""
    return f"{len(failed)} task{plural} failed: {titles}"


def notify_bulk_result(
    notifier: NotificationSink, result: BulkResult, success_message: str
) -> None:
    """
    One success message, plus one failure summary when anything failed.

    ``success_message`` may use ``{count}``. When every item failed only the
    failure summary is sent.
    """
    if result["success_count"] > 0 or len(result["failed"]) == 0:
        notifier.success(success_message.format(count=result["success_count"]))
    if len(result["failed"]) > 0:
        notifier.error(describe_failures(result))
