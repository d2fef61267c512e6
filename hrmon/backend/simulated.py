# hrmon/backend/simulated.py
from __future__ import annotations

import logging
import math
import random
import threading
import time
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from hrmon.core.errors import ConfigurationError
from hrmon.interfaces.backend import ActivityConfiguration, Completion
from hrmon.interfaces.batch_listener import BatchListener
from hrmon.model.sample import HEART_RATE, STEP_COUNT, RawSample, utc_now
from hrmon.model.units import RATE_PER_SECOND


class _EmitterWorker(threading.Thread):
    """Thread that periodically asks the backend to emit one batch."""

    def __init__(self, backend: "SimulatedWorkoutBackend", interval_s: float):
        super().__init__(daemon=True, name="hrmon-sim-emitter")
        self.backend = backend
        self.interval_s = float(interval_s)
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.wait(self.interval_s):
            try:
                self.backend.emit_once()
            except Exception:
                self.backend._log.exception("SIM_EMIT_EXCEPTION")

    def stop(self) -> None:
        self._stop_event.set()


class SimulatedWorkoutBackend:
    """
    In-process stand-in for the platform workout session.

    Emits heart-rate batches (count/s, slow sine around `baseline_bpm`) every
    `interval_s` between begin_collection() and end_collection(). Optionally
    mixes in an unrelated quantity, as real workout builders do.
    """

    SUPPORTED_QUANTITIES = (HEART_RATE, STEP_COUNT)

    def __init__(
        self,
        *,
        interval_s: float = 1.0,
        baseline_bpm: float = 72.0,
        amplitude_bpm: float = 8.0,
        samples_per_batch: int = 1,
        include_unrelated: bool = False,
        available: bool = True,
        seed: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._interval_s = float(interval_s)
        self._baseline_bpm = float(baseline_bpm)
        self._amplitude_bpm = float(amplitude_bpm)
        self._samples_per_batch = max(1, int(samples_per_batch))
        self._include_unrelated = bool(include_unrelated)
        self._available = bool(available)
        self._rng = random.Random(seed)
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._config: Optional[ActivityConfiguration] = None
        self._listener: Optional[BatchListener] = None
        self._worker: Optional[_EmitterWorker] = None
        self._collecting = False
        self._t0 = time.monotonic()

    # --- authorization / availability ---
    def is_available(self) -> bool:
        return self._available

    def request_authorization(self, read_types: Iterable[str]) -> Completion:
        unknown = [t for t in read_types if t not in self.SUPPORTED_QUANTITIES]
        if unknown:
            return False, ValueError(f"unknown quantity types: {unknown}")
        return True, None

    # --- session ---
    def configure(self, config: ActivityConfiguration) -> None:
        if config.quantity_type not in self.SUPPORTED_QUANTITIES:
            raise ConfigurationError(
                f"Quantity type '{config.quantity_type}' is not supported",
                hint=f"Use one of: {', '.join(self.SUPPORTED_QUANTITIES)}",
            )
        with self._lock:
            self._config = config
        self._log.info(
            "SIM_CONFIGURED activity=%s location=%s quantity=%s",
            config.activity_kind,
            config.location_kind,
            config.quantity_type,
        )

    def set_listener(self, listener: Optional[BatchListener]) -> None:
        with self._lock:
            self._listener = listener

    def start_activity(self, at: datetime) -> None:
        self._log.info("SIM_ACTIVITY_STARTED at=%s", at.isoformat())

    def begin_collection(self, at: datetime) -> Completion:
        with self._lock:
            if self._config is None:
                return False, RuntimeError("backend not configured")
            if self._collecting:
                return False, RuntimeError("collection already running")
            self._collecting = True
            self._t0 = time.monotonic()
            self._worker = _EmitterWorker(self, self._interval_s)
            self._worker.start()
        return True, None

    def end(self) -> None:
        self._log.info("SIM_ACTIVITY_ENDED")

    def end_collection(self, at: datetime) -> Completion:
        with self._lock:
            worker = self._worker
            self._worker = None
            was_collecting = self._collecting
            self._collecting = False

        if worker is not None:
            worker.stop()
            if worker is not threading.current_thread():
                worker.join(timeout=max(1.0, 2 * self._interval_s))

        if not was_collecting:
            return False, RuntimeError("collection was not running")
        return True, None

    def finish_session(self) -> Completion:
        with self._lock:
            if self._config is None:
                return False, RuntimeError("no session to finish")
            self._config = None
        return True, None

    # --- emission ---
    def make_batch(self, now: Optional[datetime] = None) -> List[RawSample]:
        now = now or utc_now()
        elapsed = time.monotonic() - self._t0
        batch: List[RawSample] = []

        for i in range(self._samples_per_batch):
            bpm = self._baseline_bpm + self._amplitude_bpm * math.sin(2.0 * math.pi * elapsed / 60.0)
            bpm += self._rng.uniform(-1.0, 1.0)
            end = now - timedelta(milliseconds=100 * (self._samples_per_batch - 1 - i))
            batch.append(RawSample(
                quantity_type=HEART_RATE,
                value=max(0.0, bpm) / 60.0,
                unit=RATE_PER_SECOND,
                start=end,
                end=end,
            ))

        if self._include_unrelated:
            batch.append(RawSample(quantity_type=STEP_COUNT, value=float(self._rng.randint(0, 3)),
                                   unit="count", start=now, end=now))
        return batch

    def emit_once(self) -> None:
        with self._lock:
            listener = self._listener if self._collecting else None
        if listener is None:
            return
        listener.on_batch(self.make_batch())
