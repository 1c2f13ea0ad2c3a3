# tests/test_repository.py

from __future__ import annotations

from pathlib import Path

import pendulum
import pytest
import yaml

from taskledger.errors import TaskNotFoundError, TaskRepositoryError
from taskledger.model.change import TaskChange
from taskledger.repository.task import YamlTaskRepository

from .conftest import OTHER_OWNER, OWNER, new_task


def test_insert_assigns_id_and_writes_one_file(repository: YamlTaskRepository) -> None:
    task = repository.insert(new_task("write tests"))

    assert task["id"] is not None
    assert (repository.data_dir / f"{task['id']}.yaml").is_file()
    assert repository.get(task["id"]) == task


def test_fetch_filters_by_owner_and_sorts(repository: YamlTaskRepository) -> None:
    late = new_task("late", pendulum.Date(2024, 1, 2))
    early_second = new_task("early second")
    early_second["order"] = 2
    early_first = new_task("early first")
    early_first["order"] = 1
    for task in (late, early_second, early_first):
        repository.insert(task)
    repository.insert(new_task("someone else", owner_id=OTHER_OWNER))

    titles = [task["title"] for task in repository.fetch({"owner_id": OWNER})]

    assert titles == ["early first", "early second", "late"]


def test_not_done_filter_matches_history(repository: YamlTaskRepository) -> None:
    task = new_task("recovered")
    task["status"] = "completed"
    task["completion_history"] = [
        {
            "completed_at": pendulum.datetime(2024, 1, 1, tz="UTC"),
            "status": "not-done",
            "date": pendulum.Date(2024, 1, 1),
            "was_forwarded": False,
        }
    ]
    repository.insert(task)
    repository.insert(new_task("untouched"))

    found = repository.fetch({"statuses": ["not-done"]})

    assert [task["title"] for task in found] == ["recovered"]


def test_update_merges_fields(repository: YamlTaskRepository) -> None:
    task = repository.insert(new_task("draft"))
    assert task["id"] is not None

    updated = repository.update(task["id"], {"title": "final", "order": 4})

    assert updated["title"] == "final"
    assert updated["order"] == 4
    assert updated["scheduled_date"] == task["scheduled_date"]
    assert repository.get(task["id"]) == updated


def test_unknown_ids_raise(repository: YamlTaskRepository) -> None:
    with pytest.raises(TaskNotFoundError):
        repository.update("missing", {"title": "x"})
    with pytest.raises(TaskNotFoundError):
        repository.delete("missing")
    with pytest.raises(TaskNotFoundError):
        repository.get("missing")


def test_delete_removes_the_row(repository: YamlTaskRepository) -> None:
    task = repository.insert(new_task())
    assert task["id"] is not None

    repository.delete(task["id"])

    assert repository.fetch() == []


def test_unreadable_row_is_a_repository_error(repository: YamlTaskRepository) -> None:
    repository.data_dir.mkdir(parents=True)
    (repository.data_dir / "broken.yaml").write_text("title: [unclosed")

    with pytest.raises(TaskRepositoryError):
        repository.fetch()


def corrupt_row(repository: YamlTaskRepository, task_id: str, **fields: object) -> None:
    file_path = repository.data_dir / f"{task_id}.yaml"
    row = yaml.safe_load(file_path.read_text())
    row.update(fields)
    file_path.write_text(yaml.safe_dump(row))


def test_undecodable_row_is_a_repository_error(repository: YamlTaskRepository) -> None:
    task = repository.insert(new_task("garbled"))
    corrupt_row(repository, task["id"], completion_history="not json")  # type: ignore[arg-type]

    with pytest.raises(TaskRepositoryError, match="could not decode"):
        repository.fetch()
    with pytest.raises(TaskRepositoryError, match="could not decode"):
        repository.get(task["id"])  # type: ignore[arg-type]


def test_row_missing_a_timestamp_is_not_rewritten(
    repository: YamlTaskRepository,
) -> None:
    task = repository.insert(new_task("garbled"))
    corrupt_row(repository, task["id"], created_at="last tuesday")  # type: ignore[arg-type]
    file_path = repository.data_dir / f"{task['id']}.yaml"
    before = file_path.read_text()

    with pytest.raises(TaskRepositoryError, match="could not decode"):
        repository.update(task["id"], {"title": "fixed"})  # type: ignore[arg-type]

    assert file_path.read_text() == before


def test_row_that_is_not_a_mapping(repository: YamlTaskRepository) -> None:
    repository.data_dir.mkdir(parents=True)
    (repository.data_dir / "listed.yaml").write_text("- just\n- a list\n")

    with pytest.raises(TaskRepositoryError, match="not a mapping"):
        repository.fetch()


def test_poll_reports_only_changes_made_elsewhere(tmp_path: Path) -> None:
    mine = YamlTaskRepository(tmp_path / "tasks")
    theirs = YamlTaskRepository(tmp_path / "tasks")
    seen: list[TaskChange] = []
    mine.on_change(OWNER, seen.append)

    own_task = mine.insert(new_task("mine"))
    assert mine.poll() == []

    other_task = theirs.insert(new_task("theirs"))
    changes = mine.poll()
    assert changes == [
        {"kind": "insert", "task_id": other_task["id"], "owner_id": OWNER}
    ]
    assert seen == changes

    assert own_task["id"] is not None
    theirs.update(own_task["id"], {"title": "edited elsewhere"})
    theirs.delete(other_task["id"])  # type: ignore[arg-type]
    kinds = sorted(change["kind"] for change in mine.poll())
    assert kinds == ["delete", "update"]
    assert len(seen) == 3


def test_unsubscribe_stops_notifications(tmp_path: Path) -> None:
    mine = YamlTaskRepository(tmp_path / "tasks")
    theirs = YamlTaskRepository(tmp_path / "tasks")
    seen: list[TaskChange] = []
    unsubscribe = mine.on_change(OWNER, seen.append)

    unsubscribe()
    theirs.insert(new_task())
    mine.poll()

    assert seen == []


def test_other_owners_are_not_notified(tmp_path: Path) -> None:
    mine = YamlTaskRepository(tmp_path / "tasks")
    theirs = YamlTaskRepository(tmp_path / "tasks")
    seen: list[TaskChange] = []
    mine.on_change(OWNER, seen.append)

    theirs.insert(new_task(owner_id=OTHER_OWNER))
    mine.poll()

    assert seen == []
