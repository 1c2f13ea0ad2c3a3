# tests/test_reschedule.py

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pendulum
import pytest

from taskledger.errors import RescheduleError, RescheduleStateError
from taskledger.model.entity_id import EntityId
from taskledger.model.task import Task
from taskledger.repository.reconciliation import ReconciliationRepository
from taskledger.repository.task import YamlTaskRepository
from taskledger.service.lifecycle import TaskLifecycle
from taskledger.service.reschedule import (
    BULK_REASON,
    SINGLE_REASON,
    RescheduleOperation,
    RescheduleOptions,
    RescheduleState,
    plan_reschedule,
    reschedule_task,
)
from taskledger.service.store import TaskStore
from taskledger.template.task import get_sub_item_template

from .conftest import OWNER, new_task
from .fakes import FailingRepository, FixedClock, RecordingNotifier

NEW_DATE = pendulum.Date(2024, 2, 1)


def ids_of(tasks: list[Task]) -> list[EntityId]:
    return [task["id"] for task in tasks]  # type: ignore[misc]


def successors_of(store: TaskStore, task: Task) -> list[Task]:
    return [
        candidate
        for candidate in store.snapshot()
        if candidate["cloned_from_id"] == task["id"]
    ]


def failing_store(
    tmp_path: Path,
    titles: list[str],
    fail_inserts: set[int] | None = None,
    fail_updates: set[int] | None = None,
) -> tuple[TaskStore, list[Task]]:
    """Tasks are written before the failures are armed."""
    inner = YamlTaskRepository(tmp_path / "tasks")
    tasks = [inner.insert(new_task(title)) for title in titles]
    repository = FailingRepository(inner, fail_inserts, fail_updates)
    return TaskStore(repository, OWNER), tasks  # type: ignore[arg-type]


def test_reschedule_seals_and_creates_one_successor(
    store: TaskStore, add_task: Callable[..., Task], clock: FixedClock
) -> None:
    task = add_task("call the bank", forward_count=2)

    successor = reschedule_task(store, task, NEW_DATE, now=clock())

    assert task["id"] is not None
    predecessor = store.get(task["id"])
    assert predecessor["is_concluded"] is True
    assert predecessor["concluded_at"] == clock()
    assert predecessor["forward_history"][-1]["new_date"] == NEW_DATE
    assert predecessor["forward_history"][-1]["reason"] == SINGLE_REASON

    assert successors_of(store, task) == [store.get(successor["id"])]  # type: ignore[arg-type]
    assert successor["scheduled_date"] == NEW_DATE
    assert successor["forward_count"] == 3
    assert successor["status"] == "pending"
    assert len(successor["forward_history"]) == 1
    assert successor["forward_history"][0]["original_date"] == task["scheduled_date"]
    assert successor["forward_history"][0]["reason"] == "received from 01/01/2024"
    assert successor["completion_history"] == []
    assert successor["is_concluded"] is False


def test_successor_keeps_descriptive_fields(
    store: TaskStore, add_task: Callable[..., Task]
) -> None:
    task = add_task(
        "plan trip",
        priority="extreme",
        category="business",
        order=4,
        sub_items=[get_sub_item_template("book hotel", 1)],
    )

    successor = reschedule_task(store, task, NEW_DATE)

    assert successor["title"] == "plan trip"
    assert successor["priority"] == "extreme"
    assert successor["category"] == "business"
    assert successor["order"] == 4
    assert [item["text"] for item in successor["sub_items"]] == ["book hotel"]


def test_options_reset_order_and_checklist() -> None:
    task = new_task()
    task["id"] = "task-1"
    task["order"] = 5
    sub_item = get_sub_item_template("step", 1)
    sub_item["completed"] = True
    task["sub_items"] = [sub_item]

    plan = plan_reschedule(
        task, NEW_DATE, RescheduleOptions(keep_order=False, keep_checklist=False)
    )

    assert plan["successor"]["order"] == 0
    assert plan["successor"]["sub_items"][0]["completed"] is False
    assert task["sub_items"][0]["completed"] is True


def test_failed_insert_is_compensated(
    tmp_path: Path, reconciliations: ReconciliationRepository
) -> None:
    store, (task,) = failing_store(tmp_path, ["fragile"], fail_inserts={1})

    with pytest.raises(RescheduleError) as error:
        reschedule_task(store, task, NEW_DATE, RescheduleOptions(), reconciliations)

    assert error.value.sealed is False
    predecessor = store.get(task["id"])  # type: ignore[arg-type]
    assert predecessor["is_concluded"] is False
    assert predecessor["forward_history"] == []
    assert successors_of(store, task) == []
    assert reconciliations.get_open_records() == []


def test_failed_insert_without_compensation_is_recorded(
    tmp_path: Path, reconciliations: ReconciliationRepository
) -> None:
    store, (task,) = failing_store(tmp_path, ["fragile"], fail_inserts={1})

    with pytest.raises(RescheduleError) as error:
        reschedule_task(
            store, task, NEW_DATE, RescheduleOptions(compensate=False), reconciliations
        )

    assert error.value.sealed is True
    assert store.get(task["id"])["is_concluded"] is True  # type: ignore[arg-type]
    assert successors_of(store, task) == []
    records = reconciliations.get_open_records()
    assert [(record["task_id"], record["kind"]) for record in records] == [
        (task["id"], "orphaned-seal")
    ]


def test_failed_rollback_is_recorded(
    tmp_path: Path, reconciliations: ReconciliationRepository
) -> None:
    store, (task,) = failing_store(
        tmp_path, ["fragile"], fail_inserts={1}, fail_updates={2}
    )

    with pytest.raises(RescheduleError) as error:
        reschedule_task(store, task, NEW_DATE, RescheduleOptions(), reconciliations)

    assert error.value.sealed is True
    assert store.get(task["id"])["is_concluded"] is True  # type: ignore[arg-type]
    assert len(reconciliations.get_open_records()) == 1


def test_failed_seal_writes_nothing(tmp_path: Path) -> None:
    store, (task,) = failing_store(tmp_path, ["fragile"], fail_updates={1})

    with pytest.raises(RescheduleError) as error:
        reschedule_task(store, task, NEW_DATE)

    assert error.value.sealed is False
    assert len(store.snapshot()) == 1


def test_bulk_reschedule_with_second_insert_failing(
    tmp_path: Path, reconciliations: ReconciliationRepository
) -> None:
    store, tasks = failing_store(tmp_path, ["one", "two", "three"], fail_inserts={2})
    operation = RescheduleOperation(
        store, ids_of(tasks), RescheduleOptions(compensate=False), reconciliations
    )

    operation.pick_date(NEW_DATE)
    result = operation.confirm()

    assert result["success_count"] == 2
    assert [failure["title"] for failure in result["failed"]] == ["two"]
    assert operation.state == RescheduleState.SUCCEEDED
    for task in tasks:
        assert store.get(task["id"])["is_concluded"] is True  # type: ignore[arg-type]
    for task in (tasks[0], tasks[2]):
        successors = successors_of(store, task)
        assert [successor["scheduled_date"] for successor in successors] == [NEW_DATE]
        assert (
            store.get(task["id"])["forward_history"][-1]["reason"]  # type: ignore[arg-type]
            == BULK_REASON
        )
    assert successors_of(store, tasks[1]) == []
    assert len(reconciliations.get_open_records()) == 1


def test_operation_fails_when_nothing_succeeds(tmp_path: Path) -> None:
    store, tasks = failing_store(tmp_path, ["one", "two"], fail_inserts={1, 2})
    operation = RescheduleOperation(store, ids_of(tasks))

    operation.pick_date(NEW_DATE)
    result = operation.confirm()

    assert result["success_count"] == 0
    assert len(result["failed"]) == 2
    assert operation.state == RescheduleState.FAILED


def test_operation_state_machine(store: TaskStore, add_task: Callable[..., Task]) -> None:
    task = add_task("friday task", pendulum.Date(2024, 1, 5))
    operation = RescheduleOperation(store, [task["id"]])  # type: ignore[list-item]
    assert operation.state == RescheduleState.IDLE
    assert operation.suggested_date() == pendulum.Date(2024, 1, 8)

    with pytest.raises(RescheduleStateError):
        operation.confirm()

    operation.pick_date(pendulum.Date(2024, 1, 9))
    operation.pick_date(NEW_DATE)
    assert operation.state == RescheduleState.DATE_PICKED

    operation.confirm()
    assert operation.state == RescheduleState.SUCCEEDED
    assert [successor["scheduled_date"] for successor in operation.successors] == [
        NEW_DATE
    ]

    with pytest.raises(RescheduleStateError):
        operation.pick_date(NEW_DATE)


def test_lifecycle_reschedule_notifies_once(
    lifecycle: TaskLifecycle,
    notifier: RecordingNotifier,
    add_task: Callable[..., Task],
) -> None:
    task = add_task("report")

    successor = lifecycle.reschedule(task["id"], NEW_DATE)  # type: ignore[arg-type]

    assert successor is not None
    assert notifier.successes == [
        "'report' rescheduled to 01/02/2024 and the original concluded"
    ]
    assert notifier.errors == []


def test_lifecycle_reschedule_failure_notifies_and_raises(
    tmp_path: Path, reconciliations: ReconciliationRepository, clock: FixedClock
) -> None:
    store, (task,) = failing_store(tmp_path, ["report"], fail_inserts={1})
    notifier = RecordingNotifier()
    lifecycle = TaskLifecycle(store, notifier, reconciliations, clock=clock)

    with pytest.raises(RescheduleError):
        lifecycle.reschedule(task["id"], NEW_DATE)  # type: ignore[arg-type]

    assert notifier.successes == []
    assert len(notifier.errors) == 1
    assert notifier.errors[0].startswith("could not reschedule task")
