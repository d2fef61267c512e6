from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

import pytest

from hrmon.backend.simulated import SimulatedWorkoutBackend
from hrmon.core.errors import ConfigurationError
from hrmon.interfaces.backend import ActivityConfiguration
from hrmon.model.sample import HEART_RATE, STEP_COUNT


NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
HR_CONFIG = ActivityConfiguration("walking", "outdoor", HEART_RATE)


class CollectingListener:
    def __init__(self):
        self.batches = []
        self.event = threading.Event()

    def on_batch(self, batch) -> None:
        self.batches.append(list(batch))
        self.event.set()


def test_configure_rejects_unknown_quantity():
    be = SimulatedWorkoutBackend()
    with pytest.raises(ConfigurationError):
        be.configure(ActivityConfiguration("walking", "outdoor", "blood-glucose"))


def test_begin_collection_requires_configure():
    be = SimulatedWorkoutBackend()
    ok, err = be.begin_collection(NOW)
    assert not ok and err is not None


def test_emits_batches_until_end_collection():
    be = SimulatedWorkoutBackend(interval_s=0.01, seed=1)
    listener = CollectingListener()
    be.configure(HR_CONFIG)
    be.set_listener(listener)
    be.start_activity(NOW)
    assert be.begin_collection(NOW) == (True, None)

    assert listener.event.wait(1.0)
    be.end()
    assert be.end_collection(NOW) == (True, None)
    count = len(listener.batches)
    time.sleep(0.05)
    assert len(listener.batches) == count

    assert be.finish_session() == (True, None)
    assert be.finish_session()[0] is False


def test_end_collection_when_not_collecting_fails():
    be = SimulatedWorkoutBackend()
    ok, err = be.end_collection(NOW)
    assert ok is False and err is not None


def test_make_batch_contents():
    be = SimulatedWorkoutBackend(baseline_bpm=60.0, amplitude_bpm=0.0, samples_per_batch=3,
                                 include_unrelated=True, seed=7)
    batch = be.make_batch(NOW)
    hr = [s for s in batch if s.quantity_type == HEART_RATE]
    other = [s for s in batch if s.quantity_type == STEP_COUNT]

    assert len(hr) == 3 and len(other) == 1
    assert all(s.unit == "count/s" for s in hr)
    assert all(59.0 / 60.0 <= s.value <= 61.0 / 60.0 for s in hr)
    assert max(hr, key=lambda s: s.end).end == NOW


def test_emit_once_without_collection_is_noop():
    be = SimulatedWorkoutBackend()
    listener = CollectingListener()
    be.set_listener(listener)
    be.emit_once()
    assert listener.batches == []


def test_authorization():
    be = SimulatedWorkoutBackend()
    assert be.request_authorization([HEART_RATE]) == (True, None)
    ok, err = be.request_authorization(["blood-glucose"])
    assert ok is False and err is not None
