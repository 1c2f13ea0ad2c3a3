# SPDX-License-Identifier: MIT

from typing import Optional, get_args

import typer

from taskledger.model.task import (
    RoutineCycle,
    TaskCategory,
    TaskPriority,
    TaskTimeInvestment,
    TaskType,
)


def __validate_literal(value: Optional[str], choices: tuple[str, ...]) -> Optional[str]:
    if value is None:
        return None
    if value not in choices:
        raise typer.BadParameter(f"valid inputs: {', '.join(choices)}")
    return value


def validate_type(task_type: Optional[str]) -> Optional[str]:
    return __validate_literal(task_type, get_args(TaskType))


def validate_priority(priority: Optional[str]) -> Optional[str]:
    return __validate_literal(priority, get_args(TaskPriority))


def validate_category(category: Optional[str]) -> Optional[str]:
    return __validate_literal(category, get_args(TaskCategory))


def validate_time_investment(time_investment: Optional[str]) -> Optional[str]:
    return __validate_literal(time_investment, get_args(TaskTimeInvestment))


def validate_custom_minutes(minutes: Optional[int]) -> Optional[int]:
    if minutes is None:
        return None
    if minutes <= 0:
        raise typer.BadParameter("Custom time must be a positive number of minutes")
    return minutes


def validate_order(order: Optional[int]) -> Optional[int]:
    if order is None:
        return None
    if order < 1:
        raise typer.BadParameter("Order must be 1 or greater")
    return order


def validate_routine_cycle(cycle: Optional[str]) -> Optional[str]:
    return __validate_literal(cycle, get_args(RoutineCycle))
