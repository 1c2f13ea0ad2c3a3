# SPDX-License-Identifier: MIT

"""
Interfaces the lifecycle engine consumes.

The engine depends on these Protocols rather than on the YAML repository or
the console, so storage and user feedback can be swapped (tests use fakes).
"""

from typing import Callable, Optional, Protocol

from taskledger.model.change import TaskChange
from taskledger.model.entity_id import EntityId
from taskledger.model.filter import TaskFilter
from taskledger.model.task import Task, TaskUpdate

type ChangeCallback = Callable[[TaskChange], None]
type Unsubscribe = Callable[[], None]


class TaskRepository(Protocol):
    def fetch(self, filter: Optional[TaskFilter] = None) -> list[Task]: ...

    def insert(self, task: Task) -> Task: ...

    def update(self, id: EntityId, fields: TaskUpdate) -> Task: ...

    def delete(self, id: EntityId) -> None: ...

    def on_change(self, owner_id: EntityId, callback: ChangeCallback) -> Unsubscribe: ...

    def poll(self) -> list[TaskChange]: ...


class NotificationSink(Protocol):
    """Fire-and-forget user messages."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...
