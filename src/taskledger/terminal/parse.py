# SPDX-License-Identifier: MIT

import re
from typing import Callable, Optional

import pendulum
import typer

from taskledger.time import date_from_str, today_local

RELATIVE_DATES: dict[str, Callable[[pendulum.Date], pendulum.Date]] = {
    "today": lambda today: today,
    "t": lambda today: today,
    "yesterday": lambda today: today.subtract(days=1),
    "y": lambda today: today.subtract(days=1),
    "tomorrow": lambda today: today.add(days=1),
    "o": lambda today: today.add(days=1),
}

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DAY_OFFSET = re.compile(r"^-?\d+$")
_ID_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def parse_date(date_param: Optional[str | int]) -> Optional[pendulum.Date]:
    """
    Calendar date from the command line.

    Accepts YYYY-MM-DD, a day offset from today ("1", "-1"), or one of the
    names in ``RELATIVE_DATES``. "Today" is decided in the configured
    timezone.
    """
    if date_param is None:
        return None
    date = str(date_param).strip().lower()

    if _ISO_DATE.match(date):
        try:
            return date_from_str(date)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date: {e}")
    if _DAY_OFFSET.match(date):
        return today_local().add(days=int(date))
    if date in RELATIVE_DATES:
        return RELATIVE_DATES[date](today_local())
    raise typer.BadParameter(
        f"Incorrect date format: '{date_param}' "
        "(use YYYY-MM-DD, a day offset, today, yesterday or tomorrow)"
    )


def __parse_id_token(token: str) -> range:
    if token.isdigit():
        return range(int(token), int(token) + 1)

    range_match = _ID_RANGE.match(token)
    if range_match is None:
        raise typer.BadParameter(
            f"Invalid ID: '{token}' (expected a number or a range like 3-5)"
        )
    start, end = int(range_match.group(1)), int(range_match.group(2))
    if start > end:
        raise typer.BadParameter(f"Invalid range: '{token}' (start must be <= end)")
    return range(start, end + 1)


def parse_id_list(id_param: str) -> list[int]:
    """
    Short ids from "7", "1,3,4" or "1,3-5,8".

    Returns them sorted without duplicates. Raises typer.BadParameter for
    anything else, including an empty list.
    """
    ids: set[int] = set()
    for token in id_param.split(","):
        token = token.strip()
        if token:
            ids.update(__parse_id_token(token))

    if len(ids) == 0:
        raise typer.BadParameter("No valid IDs provided")
    return sorted(ids)
