# hrmon/runtime/state_machine.py
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from hrmon.core.errors import AlreadyRunning, ConfigurationError, NotRunning
from hrmon.model.sample import utc_now
from hrmon.runtime.state import SessionSnapshot, SessionState


class SessionStateMachine:
    """
    Owns the session lifecycle: IDLE -> ACTIVE -> ENDING -> IDLE.

    Every check-and-transition happens under one lock, so concurrent
    start()/stop() calls are serialized here.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

        self._state = SessionState.IDLE
        self._started_at: Optional[datetime] = None
        self._ended_at: Optional[datetime] = None

    # --- queries ---
    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._state is SessionState.ACTIVE

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                state=self._state,
                started_at=self._started_at,
                ended_at=self._ended_at,
            )

    def require_active(self) -> None:
        with self._lock:
            if self._state is not SessionState.ACTIVE:
                raise NotRunning(f"No active session (state={self._state.value})")

    # --- transitions ---
    def start(self, activate: Callable[[], None]) -> SessionSnapshot:
        """
        IDLE -> ACTIVE. `activate` runs under the lock; if it raises
        ConfigurationError the state stays IDLE and the error is re-raised.
        """
        with self._lock:
            if self._state is not SessionState.IDLE:
                self._log.info("SESSION_START_IGNORED state=%s", self._state.value)
                raise AlreadyRunning(
                    f"Session already {self._state.value}",
                    hint="Call stop() before starting a new session.",
                )

            try:
                activate()
            except ConfigurationError as e:
                self._log.warning("SESSION_START_REJECTED code=%s msg=%s", e.code, e.message)
                raise

            self._state = SessionState.ACTIVE
            self._started_at = self._clock()
            self._ended_at = None
            self._log.info("SESSION_ACTIVE started_at=%s", self._started_at.isoformat())
            return self.snapshot()

    def begin_stop(self) -> SessionSnapshot:
        """ACTIVE -> ENDING."""
        with self._lock:
            if self._state is not SessionState.ACTIVE:
                self._log.info("SESSION_STOP_IGNORED state=%s", self._state.value)
                raise NotRunning(f"Cannot stop: session is {self._state.value}")

            self._state = SessionState.ENDING
            self._ended_at = self._clock()
            self._log.info("SESSION_ENDING ended_at=%s", self._ended_at.isoformat())
            return self.snapshot()

    def finish(self) -> SessionSnapshot:
        """ENDING -> IDLE, once teardown has completed."""
        with self._lock:
            if self._state is not SessionState.ENDING:
                raise NotRunning(f"Cannot finish: session is {self._state.value}")

            last = self.snapshot()
            self._state = SessionState.IDLE
            self._started_at = None
            self._ended_at = None
            self._log.info("SESSION_IDLE")
            return last
