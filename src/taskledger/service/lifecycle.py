# SPDX-License-Identifier: MIT

"""
User-facing task mutations.

Each single-task entry point ends in exactly one notification: success
(including "nothing to change" for a rejected duplicate) or error. Errors are
re-raised after notifying. Bulk variants run the same primitive through the
bulk runner and end in one or two notifications.
"""

import logging
from typing import Callable, Optional

import pendulum

from taskledger.errors import TaskLedgerError
from taskledger.model.entity_id import EntityId
from taskledger.model.task import CompletionOutcome, Task, TaskUpdate
from taskledger.ports import NotificationSink
from taskledger.repository.reconciliation import ReconciliationRepository
from taskledger.service import rules
from taskledger.service.bulk import BulkResult, notify_bulk_result, run_bulk
from taskledger.service.reschedule import (
    RescheduleOperation,
    RescheduleOptions,
    reschedule_task,
)
from taskledger.service.store import TaskStore
from taskledger.time import date_to_display_str, now_utc

logger = logging.getLogger(__name__)

OUTCOME_LABELS: dict[CompletionOutcome, str] = {
    "completed": "done",
    "not-done": "not done",
}

type Rule = Callable[[Task], Optional[TaskUpdate]]


class TaskLifecycle:
    def __init__(
        self,
        store: TaskStore,
        notifier: NotificationSink,
        reconciliations: Optional[ReconciliationRepository] = None,
        reschedule_options: RescheduleOptions = RescheduleOptions(),
        clock: Callable[[], pendulum.DateTime] = now_utc,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.reconciliations = reconciliations
        self.reschedule_options = reschedule_options
        self.clock = clock

    # ---- primitives (no notification) ----

    def apply(self, task: Task, rule: Rule) -> Optional[Task]:
        """
        Persist what ``rule`` decides for ``task``.

        Returns the updated task, or None when the rule made it a no-op.
        """
        if task["id"] is None:
            raise ValueError("task has no id")
        update = rule(task)
        if update is None:
            logger.debug("no-op for task %s", task["id"])
            return None
        return self.store.update(task["id"], update)

    def __completion_rule(self, outcome: CompletionOutcome) -> Rule:
        return lambda task: rules.record_completion(task, outcome, self.clock())

    def __pending_rule(self) -> Rule:
        return lambda task: rules.set_pending(task, self.clock())

    def __conclude_rule(self) -> Rule:
        return lambda task: rules.conclude(task, self.clock())

    def __unconclude_rule(self) -> Rule:
        return lambda task: rules.unconclude(task, self.clock())

    def __delegate_rule(self, person_id: Optional[EntityId]) -> Rule:
        return lambda task: rules.delegate(task, person_id)

    def __run_single(
        self,
        task_id: EntityId,
        action: Callable[[Task], Optional[Task]],
        success_message: Callable[[Task], str],
        unchanged_message: Callable[[Task], str],
        error_message: str,
    ) -> Optional[Task]:
        try:
            task = self.store.get(task_id)
            result = action(task)
        except TaskLedgerError as e:
            logger.error("%s %s: %s", error_message, task_id, e)
            self.notifier.error(f"{error_message}: {e}")
            raise
        if result is None:
            self.notifier.success(unchanged_message(task))
        else:
            self.notifier.success(success_message(task))
        return result

    def __run_bulk(
        self,
        task_ids: list[EntityId],
        action: Callable[[Task], Optional[Task]],
        success_message: str,
    ) -> BulkResult:
        result = run_bulk(task_ids, self.store.get, action)
        notify_bulk_result(self.notifier, result, success_message)
        return result

    # ---- single task ----

    def record_completion(
        self, task_id: EntityId, outcome: CompletionOutcome
    ) -> Optional[Task]:
        label = OUTCOME_LABELS[outcome]
        return self.__run_single(
            task_id,
            lambda task: self.apply(task, self.__completion_rule(outcome)),
            lambda task: f"'{task['title']}' marked {label}",
            lambda task: f"'{task['title']}' is already marked {label} today",
            "could not update task",
        )

    def set_pending(self, task_id: EntityId) -> Optional[Task]:
        return self.__run_single(
            task_id,
            lambda task: self.apply(task, self.__pending_rule()),
            lambda task: f"'{task['title']}' is pending again",
            lambda task: f"'{task['title']}' is already pending",
            "could not update task",
        )

    def conclude(self, task_id: EntityId) -> Optional[Task]:
        return self.__run_single(
            task_id,
            lambda task: self.apply(task, self.__conclude_rule()),
            lambda task: f"'{task['title']}' concluded",
            lambda task: f"'{task['title']}' is already concluded",
            "could not conclude task",
        )

    def unconclude(self, task_id: EntityId) -> Optional[Task]:
        return self.__run_single(
            task_id,
            lambda task: self.apply(task, self.__unconclude_rule()),
            lambda task: f"'{task['title']}' reopened",
            lambda task: f"'{task['title']}' is not concluded",
            "could not reopen task",
        )

    def delegate(self, task_id: EntityId, person_id: Optional[EntityId]) -> Optional[Task]:
        return self.__run_single(
            task_id,
            lambda task: self.apply(task, self.__delegate_rule(person_id)),
            lambda task: f"'{task['title']}' assigned to {person_id or 'nobody'}",
            lambda task: f"'{task['title']}' is already assigned to {person_id or 'nobody'}",
            "could not delegate task",
        )

    def delete(self, task_id: EntityId) -> None:
        def remove(task: Task) -> Task:
            self.store.remove(task_id)
            return task

        self.__run_single(
            task_id,
            remove,
            lambda task: f"'{task['title']}' deleted",
            lambda task: f"'{task['title']}' deleted",
            "could not delete task",
        )

    def reschedule(
        self,
        task_id: EntityId,
        new_date: pendulum.Date,
        options: Optional[RescheduleOptions] = None,
    ) -> Optional[Task]:
        options = options if options is not None else self.reschedule_options
        return self.__run_single(
            task_id,
            lambda task: reschedule_task(
                self.store,
                task,
                new_date,
                options,
                self.reconciliations,
                self.clock(),
            ),
            lambda task: (
                f"'{task['title']}' rescheduled to {date_to_display_str(new_date)}"
                " and the original concluded"
            ),
            lambda task: f"'{task['title']}' was not rescheduled",
            "could not reschedule task",
        )

    # ---- bulk ----

    def bulk_record_completion(
        self, task_ids: list[EntityId], outcome: CompletionOutcome
    ) -> BulkResult:
        rule = self.__completion_rule(outcome)
        return self.__run_bulk(
            task_ids,
            lambda task: self.apply(task, rule),
            f"{{count}} task(s) marked {OUTCOME_LABELS[outcome]}",
        )

    def bulk_set_pending(self, task_ids: list[EntityId]) -> BulkResult:
        rule = self.__pending_rule()
        return self.__run_bulk(
            task_ids,
            lambda task: self.apply(task, rule),
            "{count} task(s) pending again",
        )

    def bulk_conclude(self, task_ids: list[EntityId]) -> BulkResult:
        rule = self.__conclude_rule()
        return self.__run_bulk(
            task_ids,
            lambda task: self.apply(task, rule),
            "{count} task(s) concluded",
        )

    def bulk_unconclude(self, task_ids: list[EntityId]) -> BulkResult:
        rule = self.__unconclude_rule()
        return self.__run_bulk(
            task_ids,
            lambda task: self.apply(task, rule),
            "{count} task(s) reopened",
        )

    def bulk_delegate(
        self, task_ids: list[EntityId], person_id: Optional[EntityId]
    ) -> BulkResult:
        rule = self.__delegate_rule(person_id)
        return self.__run_bulk(
            task_ids,
            lambda task: self.apply(task, rule),
            f"{{count}} task(s) assigned to {person_id or 'nobody'}",
        )

    def bulk_delete(self, task_ids: list[EntityId]) -> BulkResult:
        def remove(task: Task) -> None:
            self.store.remove(task["id"])  # type: ignore[arg-type]

        return self.__run_bulk(task_ids, remove, "{count} task(s) deleted")

    def bulk_reschedule(
        self,
        task_ids: list[EntityId],
        new_date: pendulum.Date,
        options: Optional[RescheduleOptions] = None,
    ) -> BulkResult:
        operation = self.start_reschedule(task_ids, options)
        operation.pick_date(new_date)
        result = operation.confirm()
        notify_bulk_result(
            self.notifier,
            result,
            f"{{count}} task(s) rescheduled to {date_to_display_str(new_date)}"
            " and the originals concluded",
        )
        return result

    def start_reschedule(
        self,
        task_ids: list[EntityId],
        options: Optional[RescheduleOptions] = None,
    ) -> RescheduleOperation:
        return RescheduleOperation(
            self.store,
            task_ids,
            options if options is not None else self.reschedule_options,
            self.reconciliations,
            self.clock,
        )
