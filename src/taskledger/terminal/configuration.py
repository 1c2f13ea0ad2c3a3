# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from taskledger import configuration
from taskledger.repository.configuration import CONFIGURATION_REPO
from taskledger.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def __enabled(value: bool) -> str:
    return "✓ Enabled" if value else "✗ Disabled"


@app.command("show, v")
def show() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("owner_id", config["owner_id"])
    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("timezone", config["timezone"])
    table.add_row("show_header", __enabled(config["show_header"]))
    table.add_row("clear_ids_on_view", __enabled(config["clear_ids_on_view"]))
    table.add_row("log_level", config.get("log_level", "WARNING"))
    table.add_row(
        "keep_order_on_reschedule",
        __enabled(config.get("keep_order_on_reschedule", True)),
    )
    table.add_row(
        "keep_checklist_on_reschedule",
        __enabled(config.get("keep_checklist_on_reschedule", True)),
    )
    table.add_row(
        "compensate_failed_reschedule",
        __enabled(config.get("compensate_failed_reschedule", True)),
    )
    table.add_row("log_file", str(configuration.DATA_LOG_PATH))

    console.print(table)


@app.command("set, s")
def set(
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="Directory path for storing data files"),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option("--remove-data-path", help="Reset data path to the default"),
    ] = False,
    timezone: Annotated[
        Optional[str],
        typer.Option("--timezone", help="Timezone that decides the calendar day"),
    ] = None,
    show_header: Annotated[
        Optional[bool], typer.Option("--show-header/--no-show-header")
    ] = None,
    clear_ids_on_view: Annotated[
        Optional[bool],
        typer.Option(
            "--clear-ids-on-view/--no-clear-ids-on-view",
            help="Enable/disable automatic clearing of ID map before list views",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    keep_order_on_reschedule: Annotated[
        Optional[bool],
        typer.Option("--keep-order-on-reschedule/--no-keep-order-on-reschedule"),
    ] = None,
    keep_checklist_on_reschedule: Annotated[
        Optional[bool],
        typer.Option(
            "--keep-checklist-on-reschedule/--no-keep-checklist-on-reschedule"
        ),
    ] = None,
    compensate_failed_reschedule: Annotated[
        Optional[bool],
        typer.Option(
            "--compensate-failed-reschedule/--no-compensate-failed-reschedule",
            help="Roll back the seal when a rescheduled task cannot be created",
        ),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    if log_level is not None and log_level.upper() not in (
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
    ):
        raise typer.BadParameter("log level must be DEBUG, INFO, WARNING or ERROR")

    CONFIGURATION_REPO.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        timezone=timezone,
        show_header=show_header,
        clear_ids_on_view=clear_ids_on_view,
        log_level=log_level.upper() if log_level is not None else None,
        keep_order_on_reschedule=keep_order_on_reschedule,
        keep_checklist_on_reschedule=keep_checklist_on_reschedule,
        compensate_failed_reschedule=compensate_failed_reschedule,
    )
    show()
