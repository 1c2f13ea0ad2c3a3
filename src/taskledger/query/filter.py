# SPDX-License-Identifier: MIT

from taskledger.model.filter import TaskFilter
from taskledger.model.task import Task
from taskledger.service.ledger import is_forwarded


def task_matches_filter(task: Task, filter: TaskFilter) -> bool:
    if "ids" in filter and task["id"] not in filter["ids"]:
        return False
    if "owner_id" in filter and task["owner_id"] != filter["owner_id"]:
        return False
    if "date_start" in filter and task["scheduled_date"] < filter["date_start"]:
        return False
    if "date_end" in filter and task["scheduled_date"] > filter["date_end"]:
        return False

    statuses = filter.get("statuses")
    if statuses:
        if "not-done" in statuses:
            # not-done is sticky: any not-done click in the history counts
            has_not_done = any(
                entry["status"] == "not-done" for entry in task["completion_history"]
            )
            if not has_not_done and task["status"] not in statuses:
                return False
        elif task["status"] not in statuses:
            return False

    types = filter.get("types")
    if types and task["type"] not in types:
        return False
    priorities = filter.get("priorities")
    if priorities and task["priority"] not in priorities:
        return False
    categories = filter.get("categories")
    if categories and task["category"] not in categories:
        return False
    time_investments = filter.get("time_investments")
    if time_investments and task["time_investment"] not in time_investments:
        return False
    if (
        "assigned_person_id" in filter
        and task["assigned_person_id"] != filter["assigned_person_id"]
    ):
        return False
    if "has_checklist" in filter and filter["has_checklist"] != (
        len(task["sub_items"]) > 0
    ):
        return False
    if "is_forwarded" in filter and filter["is_forwarded"] != is_forwarded(task):
        return False
    if "no_order" in filter and filter["no_order"] != (task["order"] == 0):
        return False
    return True


def filter_tasks(tasks: list[Task], filter: TaskFilter) -> list[Task]:
    return [task for task in tasks if task_matches_filter(task, filter)]
