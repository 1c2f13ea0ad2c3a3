# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


class _PackageOnlyFilter(logging.Filter):
    """Keep third-party chatter off the console unless it is an error."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("taskledger"):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    console_level: str = "WARNING",
    log_file: Optional[Path] = None,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging once, early in start-up.

    Console output goes through rich on stderr so it does not interleave
    with the tables printed on stdout. When ``log_file`` is given, everything
    at ``file_level`` and above is also written there.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(logging.getLevelName(console_level.upper()))
    console_handler.addFilter(_PackageOnlyFilter())
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(file_handler)

    logging.captureWarnings(True)
