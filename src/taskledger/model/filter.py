# SPDX-License-Identifier: MIT

from typing import TypedDict

import pendulum

from taskledger.model.entity_id import EntityId
from taskledger.model.task import (
    TaskCategory,
    TaskPriority,
    TaskStatus,
    TaskTimeInvestment,
    TaskType,
)


class TaskFilter(TypedDict, total=False):
    """
    Repository query. Every key is optional; an absent key does not filter.

    ``statuses`` containing ``not-done`` matches any task that has a not-done
    record anywhere in its completion history, not only its current status.
    """

    ids: list[EntityId]
    owner_id: EntityId
    date_start: pendulum.Date
    date_end: pendulum.Date
    statuses: list[TaskStatus]
    types: list[TaskType]
    priorities: list[TaskPriority]
    categories: list[TaskCategory]
    time_investments: list[TaskTimeInvestment]
    assigned_person_id: EntityId
    has_checklist: bool
    is_forwarded: bool
    no_order: bool
