# SPDX-License-Identifier: MIT

from functools import cache

import typer

from taskledger import configuration
from taskledger.model.entity_id import EntityId
from taskledger.notification import ConsoleNotificationSink
from taskledger.repository.configuration import CONFIGURATION_REPO
from taskledger.repository.id_map import ID_MAP_REPO
from taskledger.repository.reconciliation import RECONCILIATION_REPO
from taskledger.repository.task import YamlTaskRepository
from taskledger.service.lifecycle import TaskLifecycle
from taskledger.service.reschedule import RescheduleOptions
from taskledger.service.store import TaskStore
from taskledger.terminal.parse import parse_id_list


@cache
def get_lifecycle() -> TaskLifecycle:
    """The store and lifecycle for the configured owner, built once per run."""
    config = CONFIGURATION_REPO.get_config()
    store = TaskStore(
        YamlTaskRepository(configuration.DATA_TASKS_DIR), config["owner_id"]
    )
    return TaskLifecycle(
        store,
        ConsoleNotificationSink(),
        RECONCILIATION_REPO,
        RescheduleOptions(
            keep_order=config.get("keep_order_on_reschedule", True),
            keep_checklist=config.get("keep_checklist_on_reschedule", True),
            compensate=config.get("compensate_failed_reschedule", True),
        ),
    )


def resolve_task_ids(id_param: str) -> list[EntityId]:
    ids: list[int] = parse_id_list(id_param)
    try:
        return [ID_MAP_REPO.get_real_id("tasks", id) for id in ids]
    except KeyError as e:
        raise typer.BadParameter(str(e.args[0]))
