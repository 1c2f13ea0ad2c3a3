# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from taskledger.color import (
    CONCLUDED_TASK_COLOR,
    PRIORITY_COLORS,
    STATUS_COLORS,
    colorize,
)
from taskledger.model.task import CompletionEntry, Task
from taskledger.repository.id_map import ID_MAP_REPO
from taskledger.service.ledger import is_definitive, is_forwarded
from taskledger.service.stats import estimated_minutes
from taskledger.time import (
    date_to_display_str,
    datetime_to_display_local_datetime_str,
    datetime_to_display_local_datetime_str_optional,
)
from taskledger.view.header import header

DEFAULT_COLUMNS = [
    "id",
    "date",
    "order",
    "status",
    "priority",
    "title",
    "forwards",
    "checklist",
]


def short_task_id(task: Task) -> str:
    if task["id"] is None:
        return ""
    return str(ID_MAP_REPO.associate_id("tasks", task["id"]))


def task_status_text(task: Task) -> str:
    status = colorize(task["status"], STATUS_COLORS.get(task["status"], "white"))
    if task["is_concluded"]:
        status += " ■"
    return status


def checklist_progress(task: Task) -> str:
    if len(task["sub_items"]) == 0:
        return ""
    done = len([sub_item for sub_item in task["sub_items"] if sub_item["completed"]])
    return f"{done}/{len(task['sub_items'])}"


def tasks_view(
    report_name: str,
    tasks: list[Task],
    columns: list[str] = DEFAULT_COLUMNS,
    use_color: bool = True,
) -> None:
    header(report_name)

    tasks_table = Table(box=box.SIMPLE)
    for column in columns:
        tasks_table.add_column(column)

    for task in tasks:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = short_task_id(task)
            elif column == "date":
                column_value = date_to_display_str(task["scheduled_date"])
            elif column == "order":
                column_value = str(task["order"]) if task["order"] > 0 else ""
            elif column == "status":
                column_value = task_status_text(task)
            elif column == "priority":
                column_value = colorize(
                    task["priority"], PRIORITY_COLORS.get(task["priority"], "white")
                )
            elif column == "forwards":
                column_value = str(task["forward_count"]) if is_forwarded(task) else ""
            elif column == "checklist":
                column_value = checklist_progress(task)
            elif column == "minutes":
                column_value = str(estimated_minutes(task))
            elif task[column] is not None:  # type: ignore[literal-required]
                column_value = str(task[column])  # type: ignore[literal-required]

            if use_color and task["is_concluded"] and column == "title":
                column_value = colorize(column_value, CONCLUDED_TASK_COLOR)
            row.append(column_value)
        tasks_table.add_row(*row)

    console = Console()
    console.print(tasks_table)


def __completion_label(entry: CompletionEntry) -> str:
    if entry["status"] == "reverted":
        return f"reverted ({entry['reverted_status']})"
    return entry["status"]


def single_task_view(task: Task) -> None:
    header("task")

    task_table = Table(box=box.SIMPLE)
    task_table.add_column("property")
    task_table.add_column("value")

    task_table.add_row("id", short_task_id(task))
    task_table.add_row("uuid", task["id"] or "")
    if task["cloned_from_id"] is not None:
        task_table.add_row(
            "cloned_from_id",
            str(ID_MAP_REPO.associate_id("tasks", task["cloned_from_id"])),
        )
    task_table.add_row("title", task["title"])
    task_table.add_row("description", task["description"] or "")
    task_table.add_row("observations", task["observations"] or "")
    task_table.add_row("type", task["type"])
    task_table.add_row("priority", task["priority"])
    task_table.add_row("category", task["category"])
    task_table.add_row(
        "time_investment",
        f"{task['time_investment']} ({estimated_minutes(task)} min)",
    )
    task_table.add_row("assigned_person_id", task["assigned_person_id"] or "")
    task_table.add_row("scheduled", date_to_display_str(task["scheduled_date"]))
    task_table.add_row("order", str(task["order"]))
    task_table.add_row(
        "delivery_dates",
        ", ".join(date_to_display_str(date) for date in task["delivery_dates"]),
    )
    task_table.add_row("status", task_status_text(task))
    task_table.add_row("definitive", "yes" if is_definitive(task) else "no")
    task_table.add_row("forward_count", str(task["forward_count"]))
    task_table.add_row("concluded", "yes" if task["is_concluded"] else "no")
    task_table.add_row(
        "concluded_at",
        datetime_to_display_local_datetime_str_optional(task["concluded_at"]) or "",
    )
    if task["is_routine"]:
        task_table.add_row("routine_cycle", task["routine_cycle"] or "")
    task_table.add_row("created", datetime_to_display_local_datetime_str(task["created"]))
    task_table.add_row("updated", datetime_to_display_local_datetime_str(task["updated"]))

    console = Console()
    console.print(task_table)

    if len(task["sub_items"]) > 0:
        checklist_table = Table(box=box.SIMPLE, title="checklist")
        checklist_table.add_column("order")
        checklist_table.add_column("item")
        checklist_table.add_column("state")
        for sub_item in sorted(task["sub_items"], key=lambda item: item["order"]):
            state = "done" if sub_item["completed"] else ""
            if sub_item["not_done"]:
                state = "not done"
            checklist_table.add_row(str(sub_item["order"]), sub_item["text"], state)
        console.print(checklist_table)

    if len(task["completion_history"]) > 0:
        completion_table = Table(box=box.SIMPLE, title="completion history")
        completion_table.add_column("at")
        completion_table.add_column("outcome")
        completion_table.add_column("for date")
        completion_table.add_column("forwarded")
        for entry in task["completion_history"]:
            completion_table.add_row(
                datetime_to_display_local_datetime_str(entry["completed_at"]),
                __completion_label(entry),
                date_to_display_str(entry["date"]),
                "yes" if entry["was_forwarded"] else "",
            )
        console.print(completion_table)

    if len(task["forward_history"]) > 0:
        forward_table = Table(box=box.SIMPLE, title="forward history")
        forward_table.add_column("at")
        forward_table.add_column("from")
        forward_table.add_column("to")
        forward_table.add_column("status")
        forward_table.add_column("reason")
        for record in task["forward_history"]:
            forward_table.add_row(
                datetime_to_display_local_datetime_str(record["forwarded_at"]),
                date_to_display_str(record["original_date"]),
                date_to_display_str(record["new_date"]),
                record["status_at_forward"],
                record["reason"],
            )
        console.print(forward_table)
