# hrmon/runtime/bridge.py
from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, List, Optional

from hrmon.core.errors import InvalidSample
from hrmon.interfaces.reading_sink import ReadingSink
from hrmon.model.convert import to_per_minute
from hrmon.model.sample import ConvertedReading, RawSample, most_recent, utc_now
from hrmon.model.units import RATE_PER_SECOND, is_compatible, value_in
from hrmon.runtime.state import BridgeStats


class CollectionBridge:
    """
    Batch listener registered with the session backend.

    Per batch: filter to the monitored quantity, keep the most recent sample,
    check the unit, convert to a per-minute reading and hand it to the sinks.
    Nothing here raises into the backend's callback thread.
    """

    def __init__(
        self,
        quantity_type: str,
        *,
        accepting: Callable[[], bool],
        sinks: Optional[Iterable[ReadingSink]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._quantity_type = str(quantity_type)
        self._accepting = accepting
        self._sinks: List[ReadingSink] = list(sinks or [])
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._stats = BridgeStats()

    @property
    def quantity_type(self) -> str:
        return self._quantity_type

    def add_sink(self, sink: ReadingSink) -> None:
        with self._lock:
            if sink not in self._sinks:
                self._sinks.append(sink)

    def remove_sink(self, sink: ReadingSink) -> None:
        with self._lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    def stats(self) -> BridgeStats:
        with self._lock:
            return self._stats

    # --- listener ---
    def on_batch(self, batch: Iterable[RawSample]) -> None:
        self._bump(batches_seen=1)

        if not self._accepting():
            self._bump(batches_rejected=1)
            self._log.debug("BATCH_REJECTED reason=not_active")
            return

        relevant = [s for s in batch if s.quantity_type == self._quantity_type]
        if not relevant:
            self._bump(batches_skipped=1)
            return

        latest = most_recent(relevant)
        assert latest is not None

        if not is_compatible(latest.unit, RATE_PER_SECOND):
            self._bump(batches_skipped=1)
            self._log.warning(
                "BATCH_SKIPPED reason=unit quantity=%s unit=%s",
                latest.quantity_type,
                latest.unit,
            )
            return

        try:
            rate = value_in(latest.value, latest.unit, RATE_PER_SECOND)
            bpm = to_per_minute(rate)
        except InvalidSample as e:
            self._bump(batches_skipped=1)
            self._log.warning("BATCH_SKIPPED reason=%s msg=%s", e.code, e.message)
            return

        reading = ConvertedReading(bpm=bpm, computed_at=utc_now(), quantity_type=self._quantity_type)
        self._bump(readings_emitted=1)
        self._log.info("READING bpm=%d", reading.bpm)

        with self._lock:
            sinks = list(self._sinks)

        for sink in sinks:
            try:
                sink.on_reading(reading)
            except Exception:
                self._log.exception("SINK_ON_READING_ERROR")

    def _bump(self, **deltas: int) -> None:
        with self._lock:
            s = self._stats
            self._stats = BridgeStats(
                batches_seen=s.batches_seen + deltas.get("batches_seen", 0),
                batches_rejected=s.batches_rejected + deltas.get("batches_rejected", 0),
                batches_skipped=s.batches_skipped + deltas.get("batches_skipped", 0),
                readings_emitted=s.readings_emitted + deltas.get("readings_emitted", 0),
            )
