# SPDX-License-Identifier: MIT

"""
Closing a day.

A ``DailyCloseSession`` is a two step wizard for one date. ``REVIEW`` shows
counters over the day's tasks; ``DETAIL`` lets the user click done / not
done on each of them and, once a task has been clicked in this session,
reschedule or conclude it. The click gate is kept in memory only and is
reset when another date is selected. Finishing the day changes nothing.
"""

import logging
from enum import Enum
from typing import Literal, Optional, TypedDict

import pendulum

from taskledger.errors import DailyCloseGateError, DailyCloseStepError, TaskLedgerError
from taskledger.model.entity_id import EntityId
from taskledger.model.task import FORWARDED_STATUSES, CompletionOutcome, Task
from taskledger.query.sort import sort_tasks
from taskledger.service.bulk import unique_ids
from taskledger.service.lifecycle import TaskLifecycle
from taskledger.service.reschedule import RescheduleOptions
from taskledger.time import date_to_display_str, next_business_day

logger = logging.getLogger(__name__)


class DailyCloseStep(Enum):
    REVIEW = "review"
    DETAIL = "detail"


type DailyCloseAction = Literal["completed", "not-done", "reschedule", "conclude"]


class DailyCloseStats(TypedDict):
    date: pendulum.Date
    total: int
    completed: int
    forwarded: int
    not_done: int
    pending: int
    completion_rate: int


def tasks_for_date(tasks: list[Task], date: pendulum.Date) -> list[Task]:
    """Tasks scheduled on ``date`` or due for delivery on it."""
    return [
        task
        for task in tasks
        if task["scheduled_date"] == date or date in task["delivery_dates"]
    ]


def compute_daily_stats(tasks: list[Task], date: pendulum.Date) -> DailyCloseStats:
    day_tasks = tasks_for_date(tasks, date)
    total = len(day_tasks)
    completed = len([task for task in day_tasks if task["status"] == "completed"])
    return {
        "date": date,
        "total": total,
        "completed": completed,
        "forwarded": len(
            [task for task in day_tasks if task["status"] in FORWARDED_STATUSES]
        ),
        "not_done": len([task for task in day_tasks if task["status"] == "not-done"]),
        "pending": len([task for task in day_tasks if task["status"] == "pending"]),
        # percentage, rounded half up
        "completion_rate": int(completed * 100 / total + 0.5) if total > 0 else 0,
    }


class DailyCloseSession:
    def __init__(self, lifecycle: TaskLifecycle, date: pendulum.Date) -> None:
        self.lifecycle = lifecycle
        self._date = date
        self._step = DailyCloseStep.REVIEW
        self._tasks_with_initial_status: set[EntityId] = set()

    @property
    def date(self) -> pendulum.Date:
        return self._date

    @property
    def step(self) -> DailyCloseStep:
        return self._step

    def select_date(self, date: pendulum.Date) -> None:
        if date != self._date:
            logger.debug("daily close moved from %s to %s", self._date, date)
            self._tasks_with_initial_status.clear()
        self._date = date
        self._step = DailyCloseStep.REVIEW

    def tasks(self) -> list[Task]:
        return sort_tasks(tasks_for_date(self.lifecycle.store.snapshot(), self._date))

    def review(self) -> DailyCloseStats:
        self._step = DailyCloseStep.REVIEW
        return compute_daily_stats(self.lifecycle.store.snapshot(), self._date)

    def start_detail(self) -> list[Task]:
        self._step = DailyCloseStep.DETAIL
        return self.tasks()

    @property
    def tasks_with_initial_status(self) -> set[EntityId]:
        return set(self._tasks_with_initial_status)

    def is_unlocked(self, task_id: EntityId) -> bool:
        return task_id in self._tasks_with_initial_status

    def record(self, task_id: EntityId, outcome: CompletionOutcome) -> Optional[Task]:
        self.__require_detail()
        result = self.lifecycle.record_completion(task_id, outcome)
        # a rejected same-day duplicate still counts as a click
        self._tasks_with_initial_status.add(task_id)
        return result

    def suggested_reschedule_date(self) -> pendulum.Date:
        return next_business_day(self._date)

    def reschedule(
        self,
        task_id: EntityId,
        new_date: pendulum.Date,
        options: Optional[RescheduleOptions] = None,
    ) -> Optional[Task]:
        self.__require_unlocked(task_id)
        return self.lifecycle.reschedule(task_id, new_date, options)

    def conclude(self, task_id: EntityId) -> Optional[Task]:
        self.__require_unlocked(task_id)
        return self.lifecycle.conclude(task_id)

    def refresh(self) -> None:
        """Pick up tasks another writer added, changed or removed."""
        changes = self.lifecycle.store.refresh()
        if changes:
            logger.debug("daily close saw %d outside change(s)", len(changes))

    def apply(
        self,
        action: DailyCloseAction,
        task_ids: list[EntityId],
        new_date: Optional[pendulum.Date] = None,
    ) -> list[EntityId]:
        """
        Run ``action`` on each task in turn and return the ids it failed for.

        A failure on one task does not stop the others. Gate refusals are
        reported here; every other error has already been reported by the
        lifecycle.
        """
        self.__require_detail()
        if action == "reschedule" and new_date is None:
            raise ValueError("reschedule needs a new date")

        failed: list[EntityId] = []
        for task_id in unique_ids(task_ids):
            try:
                if action == "reschedule":
                    self.reschedule(task_id, new_date)  # type: ignore[arg-type]
                elif action == "conclude":
                    self.conclude(task_id)
                else:
                    self.record(task_id, action)
            except DailyCloseGateError as e:
                logger.warning("%s refused for task %s: %s", action, task_id, e)
                self.lifecycle.notifier.error(str(e))
                failed.append(task_id)
            except TaskLedgerError:
                failed.append(task_id)
        return failed

    def finish(self) -> None:
        logger.info("closed day %s", self._date)
        self.lifecycle.notifier.success(
            f"day {date_to_display_str(self._date)} closed"
        )

    def __require_detail(self) -> None:
        if self._step != DailyCloseStep.DETAIL:
            raise DailyCloseStepError(
                f"tasks can only be updated in the detail step, not {self._step.value}"
            )

    def __require_unlocked(self, task_id: EntityId) -> None:
        self.__require_detail()
        if not self.is_unlocked(task_id):
            raise DailyCloseGateError(task_id)
