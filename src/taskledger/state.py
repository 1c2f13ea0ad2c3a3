# SPDX-License-Identifier: MIT

from contextvars import ContextVar

_clear_ids: ContextVar[bool] = ContextVar("clear_ids", default=True)

# Timezone used to decide which calendar day a timestamp falls on
_timezone: ContextVar[str] = ContextVar("timezone", default="local")


def set_clear_ids(value: bool) -> None:
    _clear_ids.set(value)


def get_clear_ids() -> bool:
    return _clear_ids.get()


def set_timezone(value: str) -> None:
    _timezone.set(value)


def get_timezone() -> str:
    return _timezone.get()
