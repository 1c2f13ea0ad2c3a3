# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

import pendulum

from taskledger.errors import TaskRepositoryError
from taskledger.model.change import TaskChange
from taskledger.model.entity_id import EntityId
from taskledger.model.filter import TaskFilter
from taskledger.model.task import Task, TaskUpdate
from taskledger.ports import ChangeCallback, Unsubscribe
from taskledger.repository.task import YamlTaskRepository


@dataclass(slots=True)
class RecordingNotifier:
    """NotificationSink that keeps every message for assertions."""

    successes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    @property
    def count(self) -> int:
        return len(self.successes) + len(self.errors)


class FixedClock:
    """Deterministic clock; advance it explicitly."""

    def __init__(self, now: pendulum.DateTime) -> None:
        self.now = now

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def advance(self, **kwargs: int) -> None:
        self.now = self.now.add(**kwargs)


class FailingRepository:
    """
    Wraps a real repository and fails selected calls.

    ``fail_inserts`` / ``fail_updates`` hold 1-based call numbers.
    """

    def __init__(
        self,
        inner: YamlTaskRepository,
        fail_inserts: set[int] | None = None,
        fail_updates: set[int] | None = None,
    ) -> None:
        self.inner = inner
        self.fail_inserts = fail_inserts or set()
        self.fail_updates = fail_updates or set()
        self.insert_calls = 0
        self.update_calls = 0

    def fetch(self, filter: TaskFilter | None = None) -> list[Task]:
        return self.inner.fetch(filter)

    def insert(self, task: Task) -> Task:
        self.insert_calls += 1
        if self.insert_calls in self.fail_inserts:
            raise TaskRepositoryError(f"simulated insert failure #{self.insert_calls}")
        return self.inner.insert(task)

    def update(self, id: EntityId, fields: TaskUpdate) -> Task:
        self.update_calls += 1
        if self.update_calls in self.fail_updates:
            raise TaskRepositoryError(f"simulated update failure #{self.update_calls}")
        return self.inner.update(id, fields)

    def delete(self, id: EntityId) -> None:
        self.inner.delete(id)

    def on_change(
        self, owner_id: EntityId, callback: ChangeCallback
    ) -> Unsubscribe:
        return self.inner.on_change(owner_id, callback)

    def poll(self) -> list[TaskChange]:
        return self.inner.poll()
