# SPDX-License-Identifier: MIT

from typing import Optional

from taskledger.model.entity_id import EntityId


class TaskLedgerError(Exception):
    pass


class TaskRepositoryError(TaskLedgerError):
    """The task repository could not complete a read or write."""


class TaskNotFoundError(TaskRepositoryError):
    def __init__(self, task_id: EntityId) -> None:
        super().__init__(f"task not found: {task_id}")
        self.task_id = task_id


class ReconciliationNotFoundError(TaskLedgerError):
    def __init__(self, record_id: EntityId) -> None:
        super().__init__(f"reconciliation record not found: {record_id}")
        self.record_id = record_id


class RescheduleError(TaskLedgerError):
    """
    A reschedule did not complete.

    ``sealed`` tells whether the predecessor was left sealed without a
    successor (compensation disabled or the compensating write failed).
    """

    def __init__(self, task_id: EntityId, reason: str, sealed: bool = False) -> None:
        super().__init__(f"reschedule of {task_id} failed: {reason}")
        self.task_id = task_id
        self.reason = reason
        self.sealed = sealed


class RescheduleStateError(TaskLedgerError):
    pass


class DailyCloseStepError(TaskLedgerError):
    pass


class DailyCloseGateError(TaskLedgerError):
    def __init__(self, task_id: EntityId, message: Optional[str] = None) -> None:
        super().__init__(
            message
            or f"task {task_id} needs a done / not-done decision in this session first"
        )
        self.task_id = task_id
