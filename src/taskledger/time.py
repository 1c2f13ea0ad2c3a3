# SPDX-License-Identifier: MIT

from typing import Optional, cast

import pendulum

from taskledger import state


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def today_local() -> pendulum.Date:
    return pendulum.now(state.get_timezone()).date()


def local_date(datetime: pendulum.DateTime) -> pendulum.Date:
    """The calendar day a timestamp falls on in the configured timezone."""
    return datetime.in_tz(state.get_timezone()).date()


def is_same_local_day(first: pendulum.DateTime, second: pendulum.DateTime) -> bool:
    return local_date(first) == local_date(second)


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_iso_str(datetime)


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    return cast(pendulum.DateTime, pendulum.parse(datetime))


def datetime_from_str_optional(datetime: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime is None:
        return None
    return datetime_from_str(datetime)


def date_to_str(date: pendulum.Date) -> str:
    """Format a calendar date as 'YYYY-MM-DD'."""
    return date.to_date_string()


def date_from_str(date: str) -> pendulum.Date:
    """Parse 'YYYY-MM-DD' (a trailing time component is ignored)."""
    return cast(pendulum.Date, pendulum.parse(date[:10], exact=True))


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("DD/MM/YYYY")


def date_to_display_long_str(date: pendulum.Date) -> str:
    return date.format("YYYY-MM-DD ddd")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz(state.get_timezone()).format("MMM-DD ddd HH:mm")


def datetime_to_display_local_datetime_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_display_local_datetime_str(datetime)


def next_business_day(date: pendulum.Date) -> pendulum.Date:
    """The first day after ``date`` that is not a Saturday or Sunday."""
    next_day = date.add(days=1)
    while next_day.day_of_week in (pendulum.SATURDAY, pendulum.SUNDAY):
        next_day = next_day.add(days=1)
    return next_day
