# hrmon/model/units.py
from __future__ import annotations

from typing import Dict

from hrmon.core.errors import InvalidSample


RATE_PER_SECOND = "count/s"
RATE_PER_MINUTE = "count/min"

# Rate units, as a factor to events per second.
_RATE_FACTORS: Dict[str, float] = {
    "count/s": 1.0,
    "1/s": 1.0,
    "hz": 1.0,
    "count/min": 1.0 / 60.0,
    "1/min": 1.0 / 60.0,
    "bpm": 1.0 / 60.0,
}


def _norm(unit: str) -> str:
    return str(unit).strip().lower().replace(" ", "")


def is_rate_unit(unit: str) -> bool:
    return _norm(unit) in _RATE_FACTORS


def is_compatible(unit: str, target: str = RATE_PER_SECOND) -> bool:
    """True when a value in `unit` can be expressed in `target`."""
    return is_rate_unit(unit) and is_rate_unit(target)


def value_in(value: float, unit: str, target: str = RATE_PER_SECOND) -> float:
    """Convert `value` from `unit` to `target`; raises InvalidSample when incompatible."""
    if not is_compatible(unit, target):
        raise InvalidSample(
            f"Unit '{unit}' is not compatible with '{target}'",
            details={"unit": unit, "target": target},
        )
    try:
        v = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidSample(f"Sample value is not a number: {value!r}") from e
    return v * _RATE_FACTORS[_norm(unit)] / _RATE_FACTORS[_norm(target)]
