# hrmon/model/convert.py
from __future__ import annotations

import math

from hrmon.core.errors import InvalidSample


def to_per_minute(rate_per_second: float) -> int:
    """floor(rate * 60). Negative or non-finite rates are rejected."""
    try:
        r = float(rate_per_second)
    except (TypeError, ValueError) as e:
        raise InvalidSample(f"Rate is not a number: {rate_per_second!r}") from e

    if not math.isfinite(r):
        raise InvalidSample(f"Rate is not finite: {r}")
    if r < 0.0:
        raise InvalidSample(f"Rate is negative: {r}", hint="Check the upstream sensor data.")

    return int(math.floor(r * 60.0))
