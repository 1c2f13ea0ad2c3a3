# SPDX-License-Identifier: MIT

import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Any, Optional, cast

from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from taskledger import time
from taskledger.errors import TaskNotFoundError, TaskRepositoryError
from taskledger.model.change import ChangeKind, TaskChange
from taskledger.model.entity_id import EntityId, generate_entity_id
from taskledger.model.filter import TaskFilter
from taskledger.model.task import Task, TaskUpdate
from taskledger.ports import ChangeCallback, Unsubscribe
from taskledger.query.filter import filter_tasks
from taskledger.query.sort import sort_tasks
from taskledger.repository.codec import task_from_row, task_to_row, update_to_row

logger = logging.getLogger(__name__)


class YamlTaskRepository:
    """
    Task rows stored one YAML file per task.

    Each write replaces a single file atomically, which is the only atomicity
    offered: there is no transaction spanning two rows.

    ``on_change`` listeners are only told about rows touched by some other
    writer. ``poll`` compares each row's ``updated_at`` against what this
    instance last saw or wrote and reports the difference.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self._listeners: dict[EntityId, list[ChangeCallback]] = defaultdict(list)
        # task id -> (updated_at, owner id) as last seen or written by us
        self._known: Optional[dict[EntityId, tuple[Optional[str], Optional[EntityId]]]] = None

    def __file_path(self, id: EntityId) -> Path:
        return self.data_dir / f"{id}.yaml"

    def __read_row(self, file_path: Path) -> Optional[dict[str, Any]]:
        try:
            row = load(file_path.read_text(), Loader=Loader)
        except (OSError, UnicodeDecodeError, YAMLError) as e:
            raise TaskRepositoryError(f"could not read {file_path.name}: {e}") from e
        if row is not None and not isinstance(row, dict):
            raise TaskRepositoryError(f"could not read {file_path.name}: not a mapping")
        return cast(Optional[dict[str, Any]], row)

    def __decode(self, file_path: Path, row: dict[str, Any]) -> Task:
        try:
            return task_from_row(row)
        except (ValueError, KeyError, TypeError) as e:
            raise TaskRepositoryError(f"could not decode {file_path.name}: {e}") from e

    def __write_row(self, row: dict[str, Any]) -> None:
        file_path = self.__file_path(row["id"])
        temp_path = file_path.with_suffix(".yaml.tmp")
        try:
            temp_path.write_text(dump(row, Dumper=Dumper, sort_keys=True))
            os.replace(temp_path, file_path)
        except (OSError, YAMLError) as e:
            raise TaskRepositoryError(f"could not write {file_path.name}: {e}") from e
        self.__remember(row)

    def __remember(self, row: dict[str, Any]) -> None:
        if self._known is None:
            self._known = self.__scan()
        self._known[row["id"]] = (row.get("updated_at"), row.get("user_id"))

    def __row_paths(self) -> list[Path]:
        if not self.data_dir.is_dir():
            return []
        return [
            file_path
            for file_path in self.data_dir.iterdir()
            if file_path.suffix == ".yaml" and file_path.name != ".gitkeep"
        ]

    def __scan(self) -> dict[EntityId, tuple[Optional[str], Optional[EntityId]]]:
        snapshot: dict[EntityId, tuple[Optional[str], Optional[EntityId]]] = {}
        for file_path in self.__row_paths():
            row = self.__read_row(file_path)
            if row is not None:
                snapshot[file_path.stem] = (row.get("updated_at"), row.get("user_id"))
        return snapshot

    def __load_task(self, id: EntityId) -> Task:
        file_path = self.__file_path(id)
        if not file_path.is_file():
            raise TaskNotFoundError(id)
        row = self.__read_row(file_path)
        if row is None:
            raise TaskNotFoundError(id)
        return self.__decode(file_path, row)

    def fetch(self, filter: Optional[TaskFilter] = None) -> list[Task]:
        tasks = []
        for file_path in self.__row_paths():
            row = self.__read_row(file_path)
            if row is not None:
                tasks.append(self.__decode(file_path, row))
        if filter is not None:
            tasks = filter_tasks(tasks, filter)
        logger.debug("fetched %d task(s) filter=%s", len(tasks), filter)
        return sort_tasks(tasks)

    def get(self, id: EntityId) -> Task:
        return self.__load_task(id)

    def insert(self, task: Task) -> Task:
        new_task = cast(Task, dict(task))
        if new_task["id"] is None:
            new_task["id"] = generate_entity_id()
        now = time.now_utc()
        new_task["created"] = now
        new_task["updated"] = now

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TaskRepositoryError(f"could not create {self.data_dir}: {e}") from e
        self.__write_row(task_to_row(new_task))
        logger.debug("inserted task %s", new_task["id"])
        return new_task

    def update(self, id: EntityId, fields: TaskUpdate) -> Task:
        file_path = self.__file_path(id)
        if not file_path.is_file():
            raise TaskNotFoundError(id)
        row = self.__read_row(file_path)
        if row is None:
            raise TaskNotFoundError(id)

        row.update(update_to_row(fields))
        row["updated_at"] = time.datetime_to_iso_str(time.now_utc())
        # a row that cannot be decoded is never written back
        updated_task = self.__decode(file_path, row)
        self.__write_row(row)
        logger.debug("updated task %s fields=%s", id, sorted(fields.keys()))
        return updated_task

    def delete(self, id: EntityId) -> None:
        file_path = self.__file_path(id)
        if not file_path.is_file():
            raise TaskNotFoundError(id)
        try:
            file_path.unlink()
        except OSError as e:
            raise TaskRepositoryError(f"could not delete {file_path.name}: {e}") from e
        if self._known is not None:
            self._known.pop(id, None)
        logger.debug("deleted task %s", id)

    def on_change(self, owner_id: EntityId, callback: ChangeCallback) -> Unsubscribe:
        if self._known is None:
            self._known = self.__scan()
        self._listeners[owner_id].append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners[owner_id]:
                self._listeners[owner_id].remove(callback)

        return unsubscribe

    def poll(self) -> list[TaskChange]:
        """Report rows that another writer inserted, changed or removed."""
        current = self.__scan()
        previous = self._known if self._known is not None else {}
        self._known = current

        changes: list[TaskChange] = []
        for id, (updated_at, owner_id) in current.items():
            if id not in previous:
                changes.append(self.__change("insert", id, owner_id))
            elif previous[id][0] != updated_at:
                changes.append(self.__change("update", id, owner_id))
        for id, (_, owner_id) in previous.items():
            if id not in current:
                changes.append(self.__change("delete", id, owner_id))

        for change in changes:
            logger.info(
                "external %s of task %s detected", change["kind"], change["task_id"]
            )
            if change["owner_id"] is None:
                continue
            for callback in list(self._listeners[change["owner_id"]]):
                callback(change)
        return changes

    def __change(
        self, kind: ChangeKind, id: EntityId, owner_id: Optional[EntityId]
    ) -> TaskChange:
        return {"kind": kind, "task_id": id, "owner_id": owner_id}
