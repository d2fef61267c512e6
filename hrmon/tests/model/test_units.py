from __future__ import annotations

import pytest

from hrmon.core.errors import InvalidSample
from hrmon.model.units import RATE_PER_SECOND, is_compatible, is_rate_unit, value_in


def test_rate_units_are_compatible():
    for unit in ("count/s", "Hz", "count/min", "1/s", "1/min", "bpm", " Count/S "):
        assert is_rate_unit(unit)
        assert is_compatible(unit, RATE_PER_SECOND)


def test_non_rate_units_are_not_compatible():
    for unit in ("count", "degC", "kcal", "m", ""):
        assert not is_compatible(unit, RATE_PER_SECOND)


def test_value_in_converts_per_minute_to_per_second():
    assert value_in(90.0, "count/min") == pytest.approx(1.5)
    assert value_in(1.5, "count/s") == 1.5
    assert value_in(2.0, "Hz") == 2.0


def test_value_in_to_per_minute_target():
    assert value_in(1.5, "count/s", "count/min") == pytest.approx(90.0)


def test_value_in_incompatible_raises():
    with pytest.raises(InvalidSample) as ei:
        value_in(3.0, "count")
    assert ei.value.details["unit"] == "count"


@pytest.mark.parametrize("bad", [None, "fast", object()])
def test_value_in_non_numeric_raises_invalid_sample(bad):
    with pytest.raises(InvalidSample):
        value_in(bad, "count/s")
