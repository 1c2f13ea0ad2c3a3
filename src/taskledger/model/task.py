# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

import pendulum

from taskledger.model.entity_id import EntityId

TaskStatus = Literal[
    "pending", "completed", "not-done", "forwarded-date", "forwarded-person"
]
CompletionOutcome = Literal["completed", "not-done"]
TaskType = Literal["meeting", "own-task", "delegated-task"]
TaskPriority = Literal["none", "priority", "extreme"]
TaskCategory = Literal["personal", "business"]
TaskTimeInvestment = Literal[
    "custom-5", "custom-30", "low", "medium", "high", "custom-4h", "custom-8h", "custom"
]
RoutineCycle = Literal["daily", "weekly", "monthly", "quarterly", "biannual", "annual"]

FORWARDED_STATUSES: tuple[TaskStatus, ...] = ("forwarded-date", "forwarded-person")


class SubItem(TypedDict):
    id: EntityId
    text: str
    completed: bool
    not_done: bool
    order: int
    subject: Optional[str]
    created: pendulum.DateTime


class CompletionRecord(TypedDict):
    """A decisive done / not-done click."""

    completed_at: pendulum.DateTime
    status: CompletionOutcome
    date: pendulum.Date
    was_forwarded: bool


class RevertRecord(TypedDict):
    """
    Undo of the previous decisive record.

    Appended instead of removing the record it reverts, so the completion
    history stays append-only.
    """

    completed_at: pendulum.DateTime
    status: Literal["reverted"]
    date: pendulum.Date
    was_forwarded: bool
    reverted_status: CompletionOutcome


type CompletionEntry = CompletionRecord | RevertRecord


class ForwardRecord(TypedDict):
    forwarded_at: pendulum.DateTime
    forwarded_to: Optional[EntityId]
    original_date: pendulum.Date
    new_date: pendulum.Date
    status_at_forward: TaskStatus
    reason: str


class Task(TypedDict):
    id: Optional[EntityId]
    owner_id: Optional[EntityId]
    cloned_from_id: Optional[EntityId]
    title: str
    description: Optional[str]
    observations: Optional[str]
    type: TaskType
    priority: TaskPriority
    category: TaskCategory
    time_investment: TaskTimeInvestment
    custom_time_minutes: Optional[int]
    assigned_person_id: Optional[EntityId]
    status: TaskStatus
    scheduled_date: pendulum.Date
    order: int
    delivery_dates: list[pendulum.Date]
    sub_items: list[SubItem]
    completion_history: list[CompletionEntry]
    forward_history: list[ForwardRecord]
    forward_count: int
    is_concluded: bool
    concluded_at: Optional[pendulum.DateTime]
    is_routine: bool
    routine_cycle: Optional[RoutineCycle]
    created: pendulum.DateTime
    updated: pendulum.DateTime


class TaskUpdate(TypedDict, total=False):
    """Partial set of task fields handed to the repository."""

    owner_id: Optional[EntityId]
    cloned_from_id: Optional[EntityId]
    title: str
    description: Optional[str]
    observations: Optional[str]
    type: TaskType
    priority: TaskPriority
    category: TaskCategory
    time_investment: TaskTimeInvestment
    custom_time_minutes: Optional[int]
    assigned_person_id: Optional[EntityId]
    status: TaskStatus
    scheduled_date: pendulum.Date
    order: int
    delivery_dates: list[pendulum.Date]
    sub_items: list[SubItem]
    completion_history: list[CompletionEntry]
    forward_history: list[ForwardRecord]
    forward_count: int
    is_concluded: bool
    concluded_at: Optional[pendulum.DateTime]
    is_routine: bool
    routine_cycle: Optional[RoutineCycle]
