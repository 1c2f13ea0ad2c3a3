# tests/test_daily_close.py

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pendulum
import pytest

from taskledger.errors import DailyCloseGateError, DailyCloseStepError
from taskledger.model.task import Task
from taskledger.repository.task import YamlTaskRepository
from taskledger.service.daily_close import (
    DailyCloseSession,
    DailyCloseStep,
    compute_daily_stats,
    tasks_for_date,
)
from taskledger.service.lifecycle import TaskLifecycle

from .conftest import new_task
from .fakes import FixedClock, RecordingNotifier

DAY = pendulum.Date(2024, 1, 1)


def task_with(status: str, scheduled_date: pendulum.Date = DAY, **fields: object) -> Task:
    task = new_task(status, scheduled_date)
    task["status"] = status  # type: ignore[typeddict-item]
    task.update(fields)  # type: ignore[typeddict-item]
    return task


def test_tasks_for_date_includes_delivery_dates() -> None:
    scheduled = task_with("pending")
    delivered = task_with("pending", pendulum.Date(2023, 12, 20), delivery_dates=[DAY])
    other = task_with("pending", pendulum.Date(2024, 1, 2))

    assert tasks_for_date([scheduled, delivered, other], DAY) == [scheduled, delivered]


def test_stats_count_each_status() -> None:
    tasks = [
        task_with("completed"),
        task_with("completed"),
        task_with("not-done"),
        task_with("forwarded-date"),
        task_with("forwarded-person"),
        task_with("pending"),
        task_with("completed", pendulum.Date(2024, 1, 2)),
    ]

    stats = compute_daily_stats(tasks, DAY)

    assert stats == {
        "date": DAY,
        "total": 6,
        "completed": 2,
        "forwarded": 2,
        "not_done": 1,
        "pending": 1,
        "completion_rate": 33,
    }


def test_completion_rate_rounds_half_up() -> None:
    tasks = [task_with("completed"), task_with("completed"), task_with("pending")]

    assert compute_daily_stats(tasks, DAY)["completion_rate"] == 67


def test_empty_day_has_zero_rate() -> None:
    assert compute_daily_stats([], DAY)["completion_rate"] == 0


def test_updates_require_the_detail_step(
    lifecycle: TaskLifecycle, add_task: Callable[..., Task]
) -> None:
    task = add_task()
    session = DailyCloseSession(lifecycle, DAY)

    assert session.step == DailyCloseStep.REVIEW
    with pytest.raises(DailyCloseStepError):
        session.record(task["id"], "completed")  # type: ignore[arg-type]
    with pytest.raises(DailyCloseStepError):
        session.conclude(task["id"])  # type: ignore[arg-type]


def test_task_completed_yesterday_stays_locked_until_clicked(
    lifecycle: TaskLifecycle,
    add_task: Callable[..., Task],
    clock: FixedClock,
) -> None:
    task = add_task("daily standup")
    lifecycle.record_completion(task["id"], "completed")  # type: ignore[arg-type]
    clock.advance(days=1)

    session = DailyCloseSession(lifecycle, DAY)
    session.start_detail()

    assert not session.is_unlocked(task["id"])  # type: ignore[arg-type]
    with pytest.raises(DailyCloseGateError):
        session.reschedule(task["id"], pendulum.Date(2024, 1, 3))  # type: ignore[arg-type]
    with pytest.raises(DailyCloseGateError):
        session.conclude(task["id"])  # type: ignore[arg-type]

    session.record(task["id"], "completed")  # type: ignore[arg-type]

    assert session.is_unlocked(task["id"])  # type: ignore[arg-type]
    concluded = session.conclude(task["id"])  # type: ignore[arg-type]
    assert concluded is not None
    assert concluded["is_concluded"] is True


def test_duplicate_click_still_unlocks(
    lifecycle: TaskLifecycle,
    notifier: RecordingNotifier,
    add_task: Callable[..., Task],
) -> None:
    task = add_task("daily standup")
    lifecycle.record_completion(task["id"], "completed")  # type: ignore[arg-type]
    session = DailyCloseSession(lifecycle, DAY)
    session.start_detail()

    assert session.record(task["id"], "completed") is None  # type: ignore[arg-type]

    assert session.tasks_with_initial_status == {task["id"]}
    assert notifier.successes[-1] == "'daily standup' is already marked done today"


def test_reschedule_after_click(
    lifecycle: TaskLifecycle, add_task: Callable[..., Task]
) -> None:
    task = add_task("friday review", pendulum.Date(2024, 1, 5))
    session = DailyCloseSession(lifecycle, pendulum.Date(2024, 1, 5))
    session.start_detail()
    session.record(task["id"], "not-done")  # type: ignore[arg-type]

    new_date = session.suggested_reschedule_date()
    successor = session.reschedule(task["id"], new_date)  # type: ignore[arg-type]

    assert new_date == pendulum.Date(2024, 1, 8)
    assert successor is not None
    assert successor["scheduled_date"] == new_date
    assert lifecycle.store.get(task["id"])["is_concluded"] is True  # type: ignore[arg-type]


def test_selecting_another_date_resets_the_gate(
    lifecycle: TaskLifecycle, add_task: Callable[..., Task]
) -> None:
    task = add_task()
    session = DailyCloseSession(lifecycle, DAY)
    session.start_detail()
    session.record(task["id"], "completed")  # type: ignore[arg-type]

    session.select_date(DAY)
    assert session.step == DailyCloseStep.REVIEW
    assert session.is_unlocked(task["id"])  # type: ignore[arg-type]

    session.select_date(pendulum.Date(2024, 1, 2))
    assert session.tasks_with_initial_status == set()

    session.select_date(DAY)
    assert not session.is_unlocked(task["id"])  # type: ignore[arg-type]


def test_review_and_detail_list_the_day(
    lifecycle: TaskLifecycle, add_task: Callable[..., Task]
) -> None:
    add_task("second", order=2)
    add_task("first", order=1)
    add_task("elsewhere", pendulum.Date(2024, 1, 2))
    session = DailyCloseSession(lifecycle, DAY)

    stats = session.review()
    tasks = session.start_detail()

    assert stats["total"] == 2
    assert stats["pending"] == 2
    assert [task["title"] for task in tasks] == ["first", "second"]
    assert session.step == DailyCloseStep.DETAIL


def test_finish_only_notifies(
    lifecycle: TaskLifecycle,
    notifier: RecordingNotifier,
    add_task: Callable[..., Task],
) -> None:
    add_task()
    session = DailyCloseSession(lifecycle, DAY)

    session.finish()

    assert notifier.successes == ["day 01/01/2024 closed"]
    assert lifecycle.store.snapshot()[0]["status"] == "pending"


def test_refresh_picks_up_tasks_written_elsewhere(
    tmp_path: Path, lifecycle: TaskLifecycle, add_task: Callable[..., Task]
) -> None:
    kept = add_task("kept", order=1)
    dropped = add_task("dropped", order=2)
    session = DailyCloseSession(lifecycle, DAY)
    assert [task["title"] for task in session.start_detail()] == ["kept", "dropped"]

    other_writer = YamlTaskRepository(tmp_path / "tasks")
    other_writer.insert(new_task("added elsewhere", DAY))
    other_writer.delete(dropped["id"])  # type: ignore[arg-type]
    assert [task["title"] for task in session.tasks()] == ["kept", "dropped"]

    session.refresh()

    titles = [task["title"] for task in session.tasks()]
    assert sorted(titles) == ["added elsewhere", "kept"]
    assert session.is_unlocked(kept["id"]) is False  # type: ignore[arg-type]


def test_apply_runs_on_every_listed_task(
    lifecycle: TaskLifecycle,
    notifier: RecordingNotifier,
    add_task: Callable[..., Task],
) -> None:
    a, b, c = (add_task(title, order=index) for index, title in enumerate("abc"))
    session = DailyCloseSession(lifecycle, DAY)
    session.start_detail()

    assert session.apply("completed", [a["id"], b["id"]]) == []  # type: ignore[list-item]
    failed = session.apply("conclude", [a["id"], c["id"], b["id"]])  # type: ignore[list-item]

    assert failed == [c["id"]]
    assert len(notifier.errors) == 1
    assert str(c["id"]) in notifier.errors[0]
    for task in (a, b):
        assert lifecycle.store.get(task["id"])["is_concluded"] is True  # type: ignore[arg-type]
    assert lifecycle.store.get(c["id"])["is_concluded"] is False  # type: ignore[arg-type]


def test_apply_reschedule_needs_a_date(
    lifecycle: TaskLifecycle, add_task: Callable[..., Task]
) -> None:
    task = add_task()
    session = DailyCloseSession(lifecycle, DAY)
    session.start_detail()

    with pytest.raises(ValueError):
        session.apply("reschedule", [task["id"]])  # type: ignore[list-item]
