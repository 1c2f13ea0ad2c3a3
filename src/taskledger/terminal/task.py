# SPDX-License-Identifier: MIT

from typing import Annotated, Callable, Optional, cast

import pendulum
import typer

from taskledger.errors import TaskLedgerError
from taskledger.id_map import clear_id_map
from taskledger.model.entity_id import EntityId
from taskledger.model.filter import TaskFilter
from taskledger.model.task import (
    RoutineCycle,
    Task,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    TaskTimeInvestment,
    TaskType,
)
from taskledger.query.sort import SortOption, sort_tasks
from taskledger.service.order import (
    apply_adjustments,
    insert_reordering,
    move_reordering,
    next_available_order,
)
from taskledger.service.reschedule import RescheduleOptions
from taskledger.service.routine import generate_routine_tasks
from taskledger.template.task import get_sub_item_template, get_task_template
from taskledger.terminal.custom_typer import AliasedTyperGroup
from taskledger.terminal.engine import get_lifecycle, resolve_task_ids
from taskledger.terminal.parse import parse_date
from taskledger.terminal.validate import (
    validate_category,
    validate_custom_minutes,
    validate_order,
    validate_priority,
    validate_routine_cycle,
    validate_time_investment,
    validate_type,
)
from taskledger.time import date_to_display_str
from taskledger.view import task as task_report

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

DATE_HELP = "valid inputs: YYYY-MM-DD, today, yesterday, tomorrow, or day offset like 1, -1"


def __run(action: Callable[[], object]) -> None:
    """Errors were already shown to the user; only the exit code is left."""
    try:
        action()
    except TaskLedgerError:
        raise typer.Exit(code=1)


@app.command("add, a", no_args_is_help=True)
def add(
    title: str,
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-d", parser=parse_date, help=DATE_HELP),
    ] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-de")] = None,
    observations: Annotated[
        Optional[str], typer.Option("--observations", "-ob")
    ] = None,
    task_type: Annotated[
        Optional[str],
        typer.Option(
            "--type",
            "-ty",
            callback=validate_type,
            help="valid input: meeting, own-task, delegated-task",
        ),
    ] = None,
    priority: Annotated[
        Optional[str],
        typer.Option(
            "--priority",
            "-pr",
            callback=validate_priority,
            help="valid input: none, priority, extreme",
        ),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option(
            "--category",
            "-ca",
            callback=validate_category,
            help="valid input: personal, business",
        ),
    ] = None,
    time_investment: Annotated[
        Optional[str],
        typer.Option(
            "--time",
            "-ti",
            callback=validate_time_investment,
            help="valid input: custom-5, custom-30, low, medium, high, custom-4h, custom-8h, custom",
        ),
    ] = None,
    custom_minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-mi", callback=validate_custom_minutes),
    ] = None,
    person: Annotated[Optional[str], typer.Option("--person", "-pe")] = None,
    delivery_dates: Annotated[
        Optional[list[pendulum.Date]],
        typer.Option(
            "--delivery",
            "-dl",
            parser=parse_date,
            help="accepts multiple delivery dates",
        ),
    ] = None,
    checklist: Annotated[
        Optional[list[str]],
        typer.Option("--item", "-i", help="checklist item (repeatable)"),
    ] = None,
    order: Annotated[
        Optional[int],
        typer.Option(
            "--order",
            "-o",
            callback=validate_order,
            help="position for the day; later tasks move down",
        ),
    ] = None,
    routine: Annotated[
        Optional[str],
        typer.Option(
            "--routine",
            "-r",
            callback=validate_routine_cycle,
            help="valid input: daily, weekly, monthly, quarterly, biannual, annual",
        ),
    ] = None,
    until: Annotated[
        Optional[pendulum.Date],
        typer.Option("--until", "-u", parser=parse_date, help="last routine date"),
    ] = None,
    include_weekends: Annotated[
        bool,
        typer.Option("--weekends/--no-weekends", help="routine dates on weekends"),
    ] = True,
) -> None:
    lifecycle = get_lifecycle()
    store = lifecycle.store

    task = get_task_template(store.owner_id, date)
    task["title"] = title
    task["description"] = description
    task["observations"] = observations
    if task_type is not None:
        task["type"] = cast(TaskType, task_type)
    if priority is not None:
        task["priority"] = cast(TaskPriority, priority)
    if category is not None:
        task["category"] = cast(TaskCategory, category)
    if custom_minutes is not None:
        task["time_investment"] = "custom"
        task["custom_time_minutes"] = custom_minutes
    elif time_investment is not None:
        task["time_investment"] = cast(TaskTimeInvestment, time_investment)
    task["assigned_person_id"] = person
    task["delivery_dates"] = delivery_dates or []
    task["sub_items"] = [
        get_sub_item_template(text, index + 1)
        for index, text in enumerate(checklist or [])
    ]

    def create() -> None:
        existing = store.snapshot()
        if order is not None:
            apply_adjustments(
                store, insert_reordering(existing, task["scheduled_date"], order)
            )
            task["order"] = order
        else:
            task["order"] = next_available_order(existing, task["scheduled_date"])

        if routine is None:
            new_task = store.insert(task)
            lifecycle.notifier.success(
                f"'{title}' added for {date_to_display_str(new_task['scheduled_date'])}"
            )
            task_report.single_task_view(new_task)
            return

        occurrences = generate_routine_tasks(
            task,
            cast(RoutineCycle, routine),
            task["scheduled_date"],
            until,
            include_weekends,
        )
        for occurrence in occurrences:
            store.insert(occurrence)
        lifecycle.notifier.success(f"routine '{title}' added {len(occurrences)} task(s)")

    try:
        create()
    except TaskLedgerError as e:
        lifecycle.notifier.error(f"could not add task: {e}")
        raise typer.Exit(code=1)


@app.command("list, ls")
@clear_id_map
def list_tasks(
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-d", parser=parse_date, help=DATE_HELP),
    ] = None,
    date_start: Annotated[
        Optional[pendulum.Date],
        typer.Option("--from", "-f", parser=parse_date, help=DATE_HELP),
    ] = None,
    date_end: Annotated[
        Optional[pendulum.Date],
        typer.Option("--to", "-t", parser=parse_date, help=DATE_HELP),
    ] = None,
    statuses: Annotated[
        Optional[list[str]],
        typer.Option(
            "--status",
            "-s",
            help="pending, completed, not-done, forwarded-date, forwarded-person",
        ),
    ] = None,
    types: Annotated[Optional[list[str]], typer.Option("--type", "-ty")] = None,
    priorities: Annotated[Optional[list[str]], typer.Option("--priority", "-pr")] = None,
    categories: Annotated[Optional[list[str]], typer.Option("--category", "-ca")] = None,
    person: Annotated[Optional[str], typer.Option("--person", "-pe")] = None,
    forwarded: Annotated[
        Optional[bool], typer.Option("--forwarded/--not-forwarded")
    ] = None,
    checklist: Annotated[
        Optional[bool], typer.Option("--checklist/--no-checklist")
    ] = None,
    no_order: Annotated[bool, typer.Option("--no-order")] = False,
    sort_by: Annotated[
        str,
        typer.Option(
            "--sort", help="order, priority, title, type or time_investment"
        ),
    ] = "order",
) -> None:
    filter: TaskFilter = {}
    if date is not None:
        filter["date_start"] = date
        filter["date_end"] = date
    if date_start is not None:
        filter["date_start"] = date_start
    if date_end is not None:
        filter["date_end"] = date_end
    if statuses:
        filter["statuses"] = cast(list[TaskStatus], statuses)
    if types:
        filter["types"] = cast(list[TaskType], types)
    if priorities:
        filter["priorities"] = cast(list[TaskPriority], priorities)
    if categories:
        filter["categories"] = cast(list[TaskCategory], categories)
    if person is not None:
        filter["assigned_person_id"] = person
    if forwarded is not None:
        filter["is_forwarded"] = forwarded
    if checklist is not None:
        filter["has_checklist"] = checklist
    if no_order:
        filter["no_order"] = True

    tasks = get_lifecycle().store.snapshot(filter)
    task_report.tasks_view("tasks", sort_tasks(tasks, cast(SortOption, sort_by)))


@app.command("show, s", no_args_is_help=True)
def show(id: int) -> None:
    task_id = resolve_task_ids(str(id))[0]
    try:
        task = get_lifecycle().store.get(task_id)
    except TaskLedgerError as e:
        get_lifecycle().notifier.error(str(e))
        raise typer.Exit(code=1)
    task_report.single_task_view(task)


def __single_or_bulk(
    id: str,
    single: Callable[[EntityId], object],
    bulk: Callable[[list[EntityId]], object],
) -> None:
    task_ids = resolve_task_ids(id)
    if len(task_ids) == 1:
        __run(lambda: single(task_ids[0]))
    else:
        __run(lambda: bulk(task_ids))


@app.command("done, d", no_args_is_help=True)
def done(id: str) -> None:
    lifecycle = get_lifecycle()
    __single_or_bulk(
        id,
        lambda task_id: lifecycle.record_completion(task_id, "completed"),
        lambda task_ids: lifecycle.bulk_record_completion(task_ids, "completed"),
    )


@app.command("not-done, nd", no_args_is_help=True)
def not_done(id: str) -> None:
    lifecycle = get_lifecycle()
    __single_or_bulk(
        id,
        lambda task_id: lifecycle.record_completion(task_id, "not-done"),
        lambda task_ids: lifecycle.bulk_record_completion(task_ids, "not-done"),
    )


@app.command("pending, p", no_args_is_help=True)
def pending(id: str) -> None:
    lifecycle = get_lifecycle()
    __single_or_bulk(id, lifecycle.set_pending, lifecycle.bulk_set_pending)


@app.command("conclude, c", no_args_is_help=True)
def conclude(id: str) -> None:
    lifecycle = get_lifecycle()
    __single_or_bulk(id, lifecycle.conclude, lifecycle.bulk_conclude)


@app.command("reopen, ro", no_args_is_help=True)
def reopen(id: str) -> None:
    lifecycle = get_lifecycle()
    __single_or_bulk(id, lifecycle.unconclude, lifecycle.bulk_unconclude)


@app.command("delegate, dg", no_args_is_help=True)
def delegate(
    id: str,
    person: Annotated[Optional[str], typer.Argument()] = None,
) -> None:
    """Assign the tasks to a person, or to nobody when no person is given."""
    lifecycle = get_lifecycle()
    __single_or_bulk(
        id,
        lambda task_id: lifecycle.delegate(task_id, person),
        lambda task_ids: lifecycle.bulk_delegate(task_ids, person),
    )


@app.command("delete, del", no_args_is_help=True)
def delete(id: str) -> None:
    lifecycle = get_lifecycle()
    __single_or_bulk(id, lifecycle.delete, lifecycle.bulk_delete)


@app.command("reschedule, rs", no_args_is_help=True)
def reschedule(
    id: str,
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option(
            "--date",
            "-d",
            parser=parse_date,
            help=f"defaults to the next business day; {DATE_HELP}",
        ),
    ] = None,
    reset_order: Annotated[
        bool, typer.Option("--reset-order", help="successor starts without an order")
    ] = False,
    reset_checklist: Annotated[
        bool,
        typer.Option("--reset-checklist", help="successor checklist starts unchecked"),
    ] = False,
    compensate: Annotated[
        Optional[bool],
        typer.Option(
            "--compensate/--no-compensate",
            help="roll back the seal when the new task cannot be created",
        ),
    ] = None,
    reason: Annotated[Optional[str], typer.Option("--reason")] = None,
) -> None:
    lifecycle = get_lifecycle()
    defaults = lifecycle.reschedule_options
    options = RescheduleOptions(
        keep_order=defaults.keep_order and not reset_order,
        keep_checklist=defaults.keep_checklist and not reset_checklist,
        compensate=defaults.compensate if compensate is None else compensate,
        reason=reason,
    )
    task_ids = resolve_task_ids(id)

    def run() -> None:
        operation = lifecycle.start_reschedule(task_ids, options)
        new_date = date if date is not None else operation.suggested_date()
        if new_date is None:
            lifecycle.notifier.error("none of the selected tasks exist any more")
            raise typer.Exit(code=1)
        if len(task_ids) == 1:
            successor = lifecycle.reschedule(task_ids[0], new_date, options)
            if successor is not None:
                task_report.single_task_view(successor)
        else:
            lifecycle.bulk_reschedule(task_ids, new_date, options)

    __run(run)


@app.command("move, mv", no_args_is_help=True)
def move(id: int, position: int) -> None:
    """Move a task to another position within its day."""
    validate_order(position)
    lifecycle = get_lifecycle()
    store = lifecycle.store
    task_id = resolve_task_ids(str(id))[0]

    try:
        task: Task = store.get(task_id)
        adjustments = move_reordering(
            store.snapshot(), task["scheduled_date"], task_id, position
        )
        apply_adjustments(store, adjustments)
        store.update(task_id, {"order": position})
    except TaskLedgerError as e:
        lifecycle.notifier.error(f"could not move task: {e}")
        raise typer.Exit(code=1)
    lifecycle.notifier.success(
        f"'{task['title']}' moved to position {position}"
        f" ({len(adjustments)} other task(s) shifted)"
    )
