# hrmon/delivery/task.py
from __future__ import annotations

import threading
from enum import Enum
from typing import Optional

from hrmon.model.sample import utc_now


class DeliveryOutcome(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class DeliveryTask:
    """One outbound POST for one reading. Never retried."""

    def __init__(self, url: str, reading: int):
        self.url = str(url)
        self.reading = int(reading)
        self.created_at = utc_now()
        self.outcome = DeliveryOutcome.PENDING
        self.status_code: Optional[int] = None
        self.error: Optional[str] = None
        self._done = threading.Event()

    def __repr__(self) -> str:
        return f"DeliveryTask(url={self.url!r}, outcome={self.outcome.value})"

    def done(self) -> bool:
        return self._done.is_set()

    def mark_success(self, status_code: int) -> None:
        self.status_code = int(status_code)
        self.outcome = DeliveryOutcome.SUCCESS
        self._done.set()

    def mark_failed(self, error: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        self.error = error
        self.outcome = DeliveryOutcome.FAILED
        self._done.set()

    def wait(self, timeout: Optional[float] = None) -> DeliveryOutcome:
        """Blocking wait for completion (diagnostics and tests only)."""
        self._done.wait(timeout)
        return self.outcome
