# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pendulum
import pytest

from taskledger import state as app_state
from taskledger.model.task import Task
from taskledger.repository.reconciliation import ReconciliationRepository
from taskledger.repository.task import YamlTaskRepository
from taskledger.service.lifecycle import TaskLifecycle
from taskledger.service.store import TaskStore
from taskledger.template.task import get_task_template

from .fakes import FixedClock, RecordingNotifier

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


@pytest.fixture(autouse=True)
def utc_calendar() -> Iterator[None]:
    """Calendar days are decided in UTC so results do not depend on the host."""
    app_state.set_timezone("UTC")
    yield
    app_state.set_timezone("local")


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(pendulum.datetime(2024, 1, 1, 10, 0, 0, tz="UTC"))


@pytest.fixture()
def repository(tmp_path: Path) -> YamlTaskRepository:
    return YamlTaskRepository(tmp_path / "tasks")


@pytest.fixture()
def reconciliations(tmp_path: Path) -> ReconciliationRepository:
    return ReconciliationRepository(tmp_path / "reconciliations")


@pytest.fixture()
def store(repository: YamlTaskRepository) -> TaskStore:
    return TaskStore(repository, OWNER)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def lifecycle(
    store: TaskStore,
    notifier: RecordingNotifier,
    reconciliations: ReconciliationRepository,
    clock: FixedClock,
) -> TaskLifecycle:
    return TaskLifecycle(store, notifier, reconciliations, clock=clock)


def new_task(
    title: str = "task",
    scheduled_date: pendulum.Date = pendulum.Date(2024, 1, 1),
    owner_id: str = OWNER,
) -> Task:
    task = get_task_template(owner_id, scheduled_date)
    task["title"] = title
    return task


@pytest.fixture()
def add_task(store: TaskStore) -> Callable[..., Task]:
    """Insert a task through the store and return it with its id."""

    def add(
        title: str = "task",
        scheduled_date: pendulum.Date = pendulum.Date(2024, 1, 1),
        **fields: object,
    ) -> Task:
        task = new_task(title, scheduled_date)
        task.update(fields)  # type: ignore[typeddict-item]
        return store.insert(task)

    return add
