# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from taskledger.id_map import clear_id_map
from taskledger.repository.reconciliation import RECONCILIATION_REPO
from taskledger.service.reconcile import reconcile as reconcile_tasks
from taskledger.terminal.engine import get_lifecycle
from taskledger.view.reconciliation import reconciliations_view


@clear_id_map
def reconcile(
    list_only: Annotated[
        bool, typer.Option("--list", "-l", help="show open records without scanning")
    ] = False,
) -> None:
    """Find reschedules that were only half applied."""
    lifecycle = get_lifecycle()
    if not list_only:
        created = reconcile_tasks(lifecycle.store.snapshot(), RECONCILIATION_REPO)
        if len(created) == 0:
            lifecycle.notifier.success("no new inconsistencies")
        else:
            lifecycle.notifier.error(f"{len(created)} new inconsistent reschedule(s) found")
    reconciliations_view(RECONCILIATION_REPO.get_open_records())
