from __future__ import annotations

import math

import pytest

from hrmon.core.errors import InvalidSample
from hrmon.model.convert import to_per_minute


def test_zero_and_one():
    assert to_per_minute(0) == 0
    assert to_per_minute(0.0) == 0
    assert to_per_minute(1.0) == 60


def test_one_and_a_half_per_second_is_ninety():
    assert to_per_minute(1.5) == 90


@pytest.mark.parametrize("r", [0.001, 0.5, 1.19, 1.2345, 2.99, 3.0, 250.75])
def test_matches_floor(r):
    assert to_per_minute(r) == math.floor(r * 60)


def test_fractional_minutes_are_truncated():
    # 1.01 * 60 = 60.6
    assert to_per_minute(1.01) == 60


def test_returns_int():
    assert isinstance(to_per_minute(1.25), int)


@pytest.mark.parametrize("bad", [-0.1, -1.0, float("nan"), float("inf"), float("-inf")])
def test_rejects_negative_and_non_finite(bad):
    with pytest.raises(InvalidSample):
        to_per_minute(bad)


def test_rejects_non_numeric():
    with pytest.raises(InvalidSample):
        to_per_minute("fast")  # type: ignore[arg-type]
