# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from rich.console import Console
from rich.padding import Padding

logger = logging.getLogger(__name__)


class ConsoleNotificationSink:
    """Prints one line per user-facing outcome."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console if console is not None else Console()

    def success(self, message: str) -> None:
        logger.info("notify success: %s", message)
        self.console.print(Padding(f"[green]✔ {message}[/green]", (0, 1)))

    def error(self, message: str) -> None:
        logger.info("notify error: %s", message)
        self.console.print(Padding(f"[bold red]✘ {message}[/bold red]", (0, 1)))
