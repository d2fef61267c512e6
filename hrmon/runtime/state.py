# hrmon/runtime/state.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ENDING = "ending"


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Immutable view of the current session, safe to share across threads.
    """
    state: SessionState
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


@dataclass(frozen=True)
class BridgeStats:
    batches_seen: int = 0
    batches_rejected: int = 0   # arrived while not active
    batches_skipped: int = 0    # nothing monitored, bad unit, bad value
    readings_emitted: int = 0


@dataclass(frozen=True)
class DeliveryStats:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    dropped: int = 0            # never issued (malformed URL, client closed)
    in_flight: int = 0


@dataclass(frozen=True)
class CoordinatorStatus:
    """
    A snapshot of the full coordinator status.
    """
    session: SessionSnapshot
    bridge: BridgeStats
    delivery: DeliveryStats
