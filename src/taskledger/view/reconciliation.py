# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from taskledger.model.reconciliation import ReconciliationRecord
from taskledger.repository.id_map import ID_MAP_REPO
from taskledger.time import datetime_to_display_local_datetime_str
from taskledger.view.header import header


def reconciliations_view(records: list[ReconciliationRecord]) -> None:
    header("reconciliation")

    table = Table(box=box.SIMPLE)
    table.add_column("id")
    table.add_column("task")
    table.add_column("kind")
    table.add_column("detail")
    table.add_column("found")
    for record in records:
        table.add_row(
            str(ID_MAP_REPO.associate_id("reconciliations", record["id"] or "")),
            str(ID_MAP_REPO.associate_id("tasks", record["task_id"])),
            record["kind"],
            record["detail"],
            datetime_to_display_local_datetime_str(record["created"]),
        )

    console = Console()
    console.print(table)
