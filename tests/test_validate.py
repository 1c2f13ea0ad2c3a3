# tests/test_validate.py

from __future__ import annotations

import pytest
import typer

from taskledger.terminal.validate import (
    validate_custom_minutes,
    validate_order,
    validate_priority,
    validate_routine_cycle,
    validate_time_investment,
    validate_type,
)


def test_literal_validators_accept_known_values() -> None:
    assert validate_type("meeting") == "meeting"
    assert validate_priority("extreme") == "extreme"
    assert validate_time_investment("custom-4h") == "custom-4h"
    assert validate_routine_cycle("biannual") == "biannual"
    assert validate_priority(None) is None


@pytest.mark.parametrize(
    ("validator", "value"),
    [
        (validate_type, "errand"),
        (validate_priority, "urgent"),
        (validate_time_investment, "forever"),
        (validate_routine_cycle, "hourly"),
    ],
)
def test_literal_validators_reject_unknown_values(validator, value: str) -> None:
    with pytest.raises(typer.BadParameter, match="valid inputs"):
        validator(value)


def test_numeric_validators() -> None:
    assert validate_custom_minutes(45) == 45
    assert validate_order(1) == 1
    with pytest.raises(typer.BadParameter):
        validate_custom_minutes(0)
    with pytest.raises(typer.BadParameter):
        validate_order(0)
