# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Callable, Optional

from taskledger.errors import TaskNotFoundError
from taskledger.model.change import TaskChange
from taskledger.model.entity_id import EntityId
from taskledger.model.filter import TaskFilter
from taskledger.model.task import Task, TaskUpdate
from taskledger.ports import TaskRepository, Unsubscribe
from taskledger.query.filter import filter_tasks

logger = logging.getLogger(__name__)

type StoreListener = Callable[[], None]


class TaskStore:
    """
    Cached projection of one owner's tasks.

    Reads hand out deep copies of the cached snapshot. Mutations go straight
    to the repository; nothing is patched into the snapshot ahead of the
    write. After a write succeeds, or when the repository reports a change
    made elsewhere, the snapshot is dropped and the next read refetches it.
    Repository errors propagate unchanged and nothing is retried.
    """

    def __init__(
        self, repository: TaskRepository, owner_id: Optional[EntityId] = None
    ) -> None:
        self.repository = repository
        self._owner_id = owner_id
        self._tasks: Optional[list[Task]] = None
        self._listeners: list[StoreListener] = []
        self._unsubscribe_repository: Optional[Unsubscribe] = None
        if owner_id is not None:
            self.__watch(owner_id)

    @property
    def owner_id(self) -> Optional[EntityId]:
        return self._owner_id

    @property
    def tasks(self) -> list[Task]:
        if self._tasks is None:
            self.__load_data()
        if self._tasks is None:
            raise ValueError()
        return self._tasks

    def __load_data(self) -> None:
        filter: TaskFilter = {}
        if self._owner_id is not None:
            filter["owner_id"] = self._owner_id
        self._tasks = self.repository.fetch(filter)
        logger.debug("loaded %d task(s) for owner %s", len(self._tasks), self._owner_id)

    def __watch(self, owner_id: EntityId) -> None:
        if self._unsubscribe_repository is not None:
            self._unsubscribe_repository()
        self._unsubscribe_repository = self.repository.on_change(
            owner_id, self.__on_external_change
        )

    def __on_external_change(self, change: TaskChange) -> None:
        logger.info(
            "task %s changed elsewhere (%s), refetching", change["task_id"], change["kind"]
        )
        self.invalidate()

    def load(self, owner_id: EntityId) -> list[Task]:
        if owner_id != self._owner_id:
            self._owner_id = owner_id
            self._tasks = None
            self.__watch(owner_id)
        return deepcopy(self.tasks)

    def snapshot(self, filter: Optional[TaskFilter] = None) -> list[Task]:
        tasks = self.tasks if filter is None else filter_tasks(self.tasks, filter)
        return deepcopy(tasks)

    def get(self, id: EntityId) -> Task:
        for task in self.tasks:
            if task["id"] == id:
                return deepcopy(task)
        raise TaskNotFoundError(id)

    def insert(self, task: Task) -> Task:
        if task["owner_id"] is None and self._owner_id is not None:
            task = deepcopy(task)
            task["owner_id"] = self._owner_id
        new_task = self.repository.insert(task)
        self.invalidate()
        return new_task

    def update(self, id: EntityId, fields: TaskUpdate) -> Task:
        updated_task = self.repository.update(id, fields)
        self.invalidate()
        return updated_task

    def remove(self, id: EntityId) -> None:
        self.repository.delete(id)
        self.invalidate()

    def refresh(self) -> list[TaskChange]:
        """Poll the repository for changes made by other writers."""
        return self.repository.poll()

    def invalidate(self) -> None:
        self._tasks = None
        for listener in list(self._listeners):
            listener()

    def subscribe(self, listener: StoreListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        if self._unsubscribe_repository is not None:
            self._unsubscribe_repository()
            self._unsubscribe_repository = None
        self._listeners.clear()
