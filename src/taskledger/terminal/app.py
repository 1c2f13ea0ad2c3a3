# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from taskledger import state as app_state
from taskledger.terminal import configuration, task
from taskledger.terminal.close import close
from taskledger.terminal.custom_typer import OrderedAliasedTyperGroup
from taskledger.terminal.reconcile import reconcile
from taskledger.terminal.stats import stats
from taskledger.view import state as view_state

app = typer.Typer(
    cls=OrderedAliasedTyperGroup,
    help="taskledger - daily task lifecycle with reschedule history",
    no_args_is_help=True,
)
app.add_typer(task.app, name="task, t")
app.command(name="close, cl")(close)
app.command(name="stats, st")(stats)
app.command(name="reconcile, rc")(reconcile)
app.add_typer(configuration.app, name="config, c")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    clear_ids: Annotated[
        bool,
        typer.Option(
            "--clear-ids/--no-clear-ids",
            help="Clear ID map",
        ),
    ] = False,
) -> None:
    """
    taskledger - daily task lifecycle with reschedule history

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)
    if clear_ids:
        app_state.set_clear_ids(True)


def run() -> None:
    app()
