# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer

from taskledger.id_map import clear_id_map
from taskledger.service.daily_close import DailyCloseAction, DailyCloseSession
from taskledger.terminal.engine import get_lifecycle, resolve_task_ids
from taskledger.terminal.parse import parse_date
from taskledger.time import date_to_str, today_local
from taskledger.view.daily_close import daily_detail_view, daily_review_view

ACTIONS_HELP = (
    "d IDS = done, n IDS = not done, r IDS = reschedule, c IDS = conclude, "
    "q = finish the day"
)
ACTION_KEYS: dict[str, DailyCloseAction] = {
    "d": "completed",
    "n": "not-done",
    "r": "reschedule",
    "c": "conclude",
}


@clear_id_map
def close(
    date: Annotated[
        Optional[pendulum.Date],
        typer.Argument(
            parser=parse_date,
            help="day to close; valid inputs: YYYY-MM-DD, today, yesterday, or day offset",
        ),
    ] = None,
) -> None:
    """Review a day, then mark each of its tasks and move or seal the leftovers."""
    lifecycle = get_lifecycle()
    session = DailyCloseSession(lifecycle, date if date is not None else today_local())

    daily_review_view(session.review())
    if not typer.confirm("Go through the tasks?", default=True):
        return

    session.start_detail()
    while True:
        session.refresh()
        tasks = session.tasks()
        daily_detail_view(tasks, session.tasks_with_initial_status)
        typer.echo(ACTIONS_HELP)
        answer = typer.prompt("action").strip()
        if answer in ("q", "quit"):
            break

        parts = answer.split()
        if len(parts) != 2 or parts[0] not in ACTION_KEYS:
            typer.echo(f"unknown action: {answer}")
            continue
        action = ACTION_KEYS[parts[0]]
        try:
            task_ids = resolve_task_ids(parts[1])
            new_date = None
            if action == "reschedule":
                suggested = session.suggested_reschedule_date()
                new_date = parse_date(
                    typer.prompt("new date", default=date_to_str(suggested))
                )
                if new_date is None:
                    continue
        except typer.BadParameter as e:
            typer.echo(e.message)
            continue

        session.apply(action, task_ids, new_date)

    session.finish()
