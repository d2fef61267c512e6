# hrmon/delivery/client.py
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Union

import httpx

from hrmon.core.errors import DeliveryFailure
from hrmon.delivery.endpoint import EndpointConfig
from hrmon.delivery.task import DeliveryTask
from hrmon.model.sample import ConvertedReading
from hrmon.runtime.state import DeliveryStats


class SampleDeliveryClient:
    """
    Fire-and-forget delivery of readings to the remote collection endpoint.

    Each reading becomes one DeliveryTask: an empty-body POST run on a worker
    pool. Outcomes are logged; nothing is retried or replayed.
    """

    def __init__(
        self,
        endpoint: EndpointConfig,
        *,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._endpoint = endpoint
        self._log = logger or logging.getLogger(__name__)

        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            timeout=endpoint.timeout_s,
            transport=transport,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(endpoint.max_workers)),
            thread_name_prefix="hrmon-delivery",
        )

        self._lock = threading.Lock()
        self._pending: List[DeliveryTask] = []
        self._closed = False
        self._http_closed = False

        self._attempted = 0
        self._succeeded = 0
        self._failed = 0
        self._dropped = 0

    @property
    def endpoint(self) -> EndpointConfig:
        return self._endpoint

    # ---------------- Public API ----------------
    def build_url(self, reading: int) -> str:
        """Target URL for `reading`; raises DeliveryFailure if it is not a valid http(s) URL."""
        try:
            raw = self._endpoint.url_for(int(reading))
            url = httpx.URL(raw)
        except (httpx.InvalidURL, KeyError, IndexError, ValueError) as e:
            raise DeliveryFailure(f"Malformed delivery URL for reading={reading}: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise DeliveryFailure(
                f"Malformed delivery URL: {raw}",
                hint="Check endpoint scheme/host/port in the configuration.",
            )
        return str(url)

    def deliver(self, reading: Union[int, ConvertedReading]) -> Optional[DeliveryTask]:
        """
        Issue one POST for `reading` without waiting for it.
        Returns the task, or None when the reading was dropped before sending.
        """
        bpm = reading.bpm if isinstance(reading, ConvertedReading) else int(reading)

        try:
            url = self.build_url(bpm)
        except DeliveryFailure as e:
            self._drop(bpm, e.message)
            return None

        open_tasks = self.in_flight()
        if open_tasks:
            self._log.debug("OPEN_TASKS count=%d tasks=%s", len(open_tasks), open_tasks)

        task = DeliveryTask(url=url, reading=bpm)
        with self._lock:
            if self._closed:
                closed = True
            else:
                closed = False
                self._pending.append(task)
                self._attempted += 1

        if closed:
            self._drop(bpm, "client closed")
            return None

        try:
            fut = self._executor.submit(self._post, task)
        except RuntimeError as e:
            # executor shut down between the check and submit
            with self._lock:
                if task in self._pending:
                    self._pending.remove(task)
                self._attempted -= 1
            self._drop(bpm, str(e))
            return None

        fut.add_done_callback(lambda f, t=task: self._on_done(t, f))
        self._log.debug("DELIVERY_SUBMITTED url=%s", url)
        return task

    # ReadingSink
    def on_reading(self, reading: ConvertedReading) -> None:
        self.deliver(reading)

    def in_flight(self) -> List[DeliveryTask]:
        with self._lock:
            return list(self._pending)

    def stats(self) -> DeliveryStats:
        with self._lock:
            return DeliveryStats(
                attempted=self._attempted,
                succeeded=self._succeeded,
                failed=self._failed,
                dropped=self._dropped,
                in_flight=len(self._pending),
            )

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for in-flight tasks to settle. Returns True if none remain."""
        deadline = None if timeout is None else time.monotonic() + float(timeout)
        for task in self.in_flight():
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            task.wait(remaining)
        return not self.in_flight()

    def close(self, timeout: Optional[float] = None) -> None:
        """Stop accepting readings, give pending ones `timeout` seconds, then release resources."""
        with self._lock:
            if self._closed:
                return
            self._closed = True

        if not self.drain(timeout):
            self._log.warning("DELIVERY_CLOSE_ABANDONED in_flight=%d", len(self.in_flight()))

        self._executor.shutdown(wait=False, cancel_futures=True)
        self._release_http_if_idle()

    @property
    def http_closed(self) -> bool:
        with self._lock:
            return self._http_closed

    # ---------------- Internal ----------------
    def _post(self, task: DeliveryTask) -> int:
        try:
            response = self._http.post(task.url, content=b"")
        except httpx.HTTPError as e:
            raise DeliveryFailure(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise DeliveryFailure(
                f"HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )
        return response.status_code

    def _on_done(self, task: DeliveryTask, fut: Future) -> None:
        status_code: Optional[int] = None
        error: Optional[str] = None
        if fut.cancelled():
            error = "cancelled"
        else:
            exc = fut.exception()
            if exc is None:
                status_code = fut.result()
            elif isinstance(exc, DeliveryFailure):
                error = exc.message
                status_code = exc.details.get("status_code")
            else:
                error = f"{type(exc).__name__}: {exc}"

        # counters before the task is marked, so waiters observe them
        with self._lock:
            if task in self._pending:
                self._pending.remove(task)
            if error is None:
                self._succeeded += 1
            else:
                self._failed += 1

        # last task abandoned by close() releases the owned client
        self._release_http_if_idle()

        if error is None:
            self._log.info("DELIVERY_OK url=%s status=%s", task.url, status_code)
            task.mark_success(status_code)
        else:
            self._log.warning(
                "DELIVERY_FAILED url=%s status=%s err=%s",
                task.url,
                status_code,
                error,
            )
            task.mark_failed(error, status_code)

    def _release_http_if_idle(self) -> None:
        with self._lock:
            if not (self._closed and self._owns_http) or self._pending or self._http_closed:
                return
            self._http_closed = True
        self._http.close()
        self._log.debug("DELIVERY_HTTP_CLOSED")

    def _drop(self, reading: int, reason: str) -> None:
        with self._lock:
            self._dropped += 1
        self._log.warning("DELIVERY_DROPPED reading=%d reason=%s", reading, reason)
