from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone

import httpx
import pytest

from hrmon.core.errors import DeliveryFailure
from hrmon.delivery.client import SampleDeliveryClient
from hrmon.delivery.endpoint import EndpointConfig
from hrmon.delivery.task import DeliveryOutcome
from hrmon.model.sample import ConvertedReading


class FakeEndpoint:
    """MockTransport handler recording every request it sees."""

    def __init__(self, status: int = 200, error: Exception | None = None, gate: threading.Event | None = None):
        self.status = status
        self.error = error
        self.gate = gate
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
        if self.gate is not None:
            self.gate.wait(timeout=2.0)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, text="ignored")


def _client(handler, **endpoint_kw) -> SampleDeliveryClient:
    endpoint = EndpointConfig(**endpoint_kw)
    return SampleDeliveryClient(
        endpoint,
        transport=httpx.MockTransport(handler),
        logger=logging.getLogger("test"),
    )


def test_build_url_default_endpoint():
    client = _client(FakeEndpoint())
    try:
        assert client.build_url(90) == "http://localhost:8080/IoT-Application/rest/v1/saveHeartRate/90"
    finally:
        client.close()


def test_build_url_custom_endpoint():
    client = _client(FakeEndpoint(), host="collector.example", port=9000, base_path="/api/", scheme="https")
    try:
        assert client.build_url(72) == "https://collector.example:9000/api/saveHeartRate/72"
    finally:
        client.close()


def test_build_url_empty_host_is_malformed():
    client = _client(FakeEndpoint(), host="")
    try:
        with pytest.raises(DeliveryFailure):
            client.build_url(60)
    finally:
        client.close()


def test_deliver_posts_empty_body_to_reading_path():
    endpoint = FakeEndpoint()
    client = _client(endpoint)
    try:
        task = client.deliver(ConvertedReading(bpm=90))
        assert task is not None
        assert task.wait(2.0) is DeliveryOutcome.SUCCESS
        assert task.status_code == 200

        assert len(endpoint.requests) == 1
        req = endpoint.requests[0]
        assert req.method == "POST"
        assert req.url.path == "/IoT-Application/rest/v1/saveHeartRate/90"
        assert req.content == b""

        st = client.stats()
        assert (st.attempted, st.succeeded, st.failed, st.in_flight) == (1, 1, 0, 0)
    finally:
        client.close()


def test_deliver_accepts_plain_int():
    endpoint = FakeEndpoint()
    client = _client(endpoint)
    try:
        task = client.deliver(61)
        assert task.wait(2.0) is DeliveryOutcome.SUCCESS
        assert endpoint.requests[0].url.path.endswith("/saveHeartRate/61")
    finally:
        client.close()


def test_non_2xx_is_logged_and_dropped(caplog):
    endpoint = FakeEndpoint(status=500)
    client = _client(endpoint)
    try:
        with caplog.at_level(logging.WARNING):
            task = client.deliver(80)
            assert task.wait(2.0) is DeliveryOutcome.FAILED
        assert task.status_code == 500
        assert any("DELIVERY_FAILED" in r.getMessage() for r in caplog.records)
        assert client.stats().failed == 1
        # never retried
        assert len(endpoint.requests) == 1
    finally:
        client.close()


def test_network_error_is_logged_and_dropped(caplog):
    endpoint = FakeEndpoint(error=httpx.ConnectError("connection refused"))
    client = _client(endpoint)
    try:
        with caplog.at_level(logging.WARNING):
            task = client.deliver(70)
            assert task.wait(2.0) is DeliveryOutcome.FAILED
        assert "ConnectError" in (task.error or "")
        assert task.status_code is None
        assert len(endpoint.requests) == 1
    finally:
        client.close()


def test_malformed_url_drops_reading_without_request(caplog):
    endpoint = FakeEndpoint()
    client = _client(endpoint, host="")
    try:
        with caplog.at_level(logging.WARNING):
            assert client.deliver(65) is None
        assert endpoint.requests == []
        st = client.stats()
        assert st.dropped == 1 and st.attempted == 0
        assert any("DELIVERY_DROPPED" in r.getMessage() for r in caplog.records)
    finally:
        client.close()


def test_deliver_does_not_block_and_tracks_in_flight():
    gate = threading.Event()
    endpoint = FakeEndpoint(gate=gate)
    client = _client(endpoint)
    try:
        t1 = client.deliver(60)
        t2 = client.deliver(61)
        assert not t1.done() or not t2.done()
        assert len(client.in_flight()) >= 1

        gate.set()
        assert client.drain(2.0)
        assert client.in_flight() == []
        assert {t1.outcome, t2.outcome} == {DeliveryOutcome.SUCCESS}
    finally:
        gate.set()
        client.close()


def test_identical_readings_are_not_deduplicated():
    endpoint = FakeEndpoint()
    client = _client(endpoint)
    try:
        for _ in range(3):
            client.deliver(75)
        assert client.drain(2.0)
        assert len(endpoint.requests) == 3
    finally:
        client.close()


def test_on_reading_delivers():
    endpoint = FakeEndpoint()
    client = _client(endpoint)
    try:
        client.on_reading(ConvertedReading(bpm=88))
        assert client.drain(2.0)
        assert endpoint.requests[0].url.path.endswith("/88")
    finally:
        client.close()


def test_deliver_after_close_is_dropped():
    endpoint = FakeEndpoint()
    client = _client(endpoint)
    client.close()
    assert client.deliver(60) is None
    assert client.stats().dropped == 1
    assert endpoint.requests == []


def test_close_releases_http_client_after_abandoned_task_settles():
    gate = threading.Event()
    client = _client(FakeEndpoint(gate=gate))
    try:
        task = client.deliver(60)
        client.close(timeout=0.01)
        assert not task.done()
        assert client.http_closed is False
    finally:
        gate.set()

    assert task.wait(2.0) is DeliveryOutcome.SUCCESS
    assert client.http_closed is True


def test_close_when_idle_releases_http_client():
    client = _client(FakeEndpoint())
    client.close()
    assert client.http_closed is True


def test_task_created_at_is_utc_timestamp():
    client = _client(FakeEndpoint())
    try:
        before = datetime.now(timezone.utc)
        task = client.deliver(60)
        assert task.created_at.tzinfo is not None
        assert task.created_at >= before
        task.wait(2.0)
    finally:
        client.close()
