# hrmon/interfaces/backend.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol, Tuple

from hrmon.interfaces.batch_listener import BatchListener

# (success, error) as reported by the backend's completion handlers
Completion = Tuple[bool, Optional[Exception]]


@dataclass(frozen=True)
class ActivityConfiguration:
    """
    Fixed configuration handed to the session backend on start().
    """
    activity_kind: str
    location_kind: str
    quantity_type: str


class WorkoutBackend(Protocol):
    """
    Sensor/session backend. Emits batches asynchronously to the registered listener.

    configure() raises ConfigurationError when the platform refuses the configuration.
    """
    def is_available(self) -> bool: ...
    def request_authorization(self, read_types: Iterable[str]) -> Completion: ...

    def configure(self, config: ActivityConfiguration) -> None: ...
    def set_listener(self, listener: Optional[BatchListener]) -> None: ...

    def start_activity(self, at: datetime) -> None: ...
    def begin_collection(self, at: datetime) -> Completion: ...

    def end(self) -> None: ...
    def end_collection(self, at: datetime) -> Completion: ...
    def finish_session(self) -> Completion: ...
