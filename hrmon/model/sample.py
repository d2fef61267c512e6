# hrmon/model/sample.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional


# Quantity type identifiers understood by the collection bridge.
HEART_RATE = "heart-rate"
STEP_COUNT = "step-count"
ACTIVE_ENERGY = "active-energy"

# Workout kinds used for the activity configuration.
ACTIVITY_WALKING = "walking"
LOCATION_OUTDOOR = "outdoor"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RawSample:
    """
    One quantity emitted by the sensor backend.

    value is expressed in `unit` (e.g. 1.5 'count/s').
    end is the sample timestamp used to pick the most recent sample in a batch.
    """
    quantity_type: str
    value: float
    unit: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def timestamp(self) -> Optional[datetime]:
        return self.end or self.start


@dataclass(frozen=True)
class ConvertedReading:
    """Integer events-per-minute reading ready for delivery."""
    bpm: int
    computed_at: datetime = field(default_factory=utc_now)
    quantity_type: str = HEART_RATE

    def as_dict(self) -> dict:
        return {
            "bpm": self.bpm,
            "computed_at": self.computed_at.isoformat(),
            "quantity_type": self.quantity_type,
        }


def _as_utc(ts: Optional[datetime]) -> Optional[datetime]:
    if ts is not None and ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def most_recent(samples: Iterable[RawSample]) -> Optional[RawSample]:
    """
    Latest sample by timestamp. Naive timestamps are taken as UTC. Samples
    without a timestamp rank lowest; among equals the later one in iteration
    order wins.
    """
    best: Optional[RawSample] = None
    best_ts: Optional[datetime] = None
    for s in samples:
        ts = _as_utc(s.timestamp)
        if best is None:
            best, best_ts = s, ts
            continue
        if ts is None:
            if best_ts is None:
                best = s
            continue
        if best_ts is None or ts >= best_ts:
            best, best_ts = s, ts
    return best
