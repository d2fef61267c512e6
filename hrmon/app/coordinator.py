# hrmon/app/coordinator.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from hrmon.app.config import MonitorConfig
from hrmon.core.errors import ConfigurationError
from hrmon.delivery.client import SampleDeliveryClient
from hrmon.interfaces.backend import WorkoutBackend
from hrmon.interfaces.reading_sink import ReadingSink
from hrmon.model.sample import utc_now
from hrmon.runtime.bridge import CollectionBridge
from hrmon.runtime.state import CoordinatorStatus, SessionState
from hrmon.runtime.state_machine import SessionStateMachine


class SessionCoordinator:
    """
    Top-level object wiring the state machine, the collection bridge and the
    delivery client to a workout backend. Exposes start()/stop() to the
    trigger layer (CLI, UI, ...).
    """

    def __init__(
        self,
        config: MonitorConfig,
        *,
        backend: WorkoutBackend,
        delivery: Optional[SampleDeliveryClient] = None,
        clock: Callable[[], datetime] = utc_now,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._backend = backend
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)

        self._machine = SessionStateMachine(clock=clock, logger=self._log)
        self._delivery = delivery or SampleDeliveryClient(config.endpoint, logger=self._log)
        self._bridge = CollectionBridge(
            config.activity.quantity_type,
            accepting=lambda: self._machine.is_active,
            sinks=[self._delivery],
            logger=self._log,
        )

    @property
    def config(self) -> MonitorConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._machine.state

    @property
    def bridge(self) -> CollectionBridge:
        return self._bridge

    @property
    def delivery(self) -> SampleDeliveryClient:
        return self._delivery

    def add_sink(self, sink: ReadingSink) -> None:
        self._bridge.add_sink(sink)

    def remove_sink(self, sink: ReadingSink) -> None:
        self._bridge.remove_sink(sink)

    # --- authorization (precondition gate) ---
    def authorize(self) -> bool:
        """
        Ask the backend for read access to the monitored quantity.
        Failures are logged only; start() does not depend on the result.
        """
        if not self._backend.is_available():
            self._log.error("HEALTH_DATA_UNAVAILABLE")
            return False

        qt = self._config.activity.quantity_type
        try:
            ok, err = self._backend.request_authorization([qt])
        except Exception:
            self._log.exception("AUTHORIZATION_REQUEST_ERROR quantity=%s", qt)
            return False

        if ok:
            self._log.info("AUTHORIZATION_ACCEPTED quantity=%s", qt)
        else:
            self._log.warning("AUTHORIZATION_FAILED quantity=%s err=%s", qt, err)
        return bool(ok)

    # --- trigger surface ---
    def start(self) -> bool:
        """
        Begin a session. Returns False (state stays IDLE) when the backend
        rejects the configuration. Raises AlreadyRunning if not idle.
        """
        try:
            self._machine.start(self._activate)
        except ConfigurationError as e:
            self._log.error("SESSION_START_FAILED code=%s msg=%s", e.code, e.message)
            return False
        return True

    def stop(self) -> None:
        """
        End the session. Raises NotRunning if idle. Teardown failures are
        logged and the state always returns to IDLE. In-flight deliveries
        are not awaited.
        """
        self._machine.begin_stop()
        self._log.info("SESSION_STOP")

        try:
            self._teardown()
        finally:
            self._machine.finish()

    def status(self) -> CoordinatorStatus:
        return CoordinatorStatus(
            session=self._machine.snapshot(),
            bridge=self._bridge.stats(),
            delivery=self._delivery.stats(),
        )

    def close(self) -> None:
        if self._machine.state is SessionState.ACTIVE:
            self.stop()
        self._delivery.close(timeout=self._config.drain_timeout_s)

    def __enter__(self) -> "SessionCoordinator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- internals ---
    def _activate(self) -> None:
        activity = self._config.activity
        self._log.info(
            "SESSION_START activity=%s location=%s quantity=%s url=%s",
            activity.activity_kind,
            activity.location_kind,
            activity.quantity_type,
            self._config.endpoint.base_url,
        )

        try:
            self._backend.configure(activity.to_backend())
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Backend rejected configuration: {e}") from e

        try:
            self._backend.set_listener(self._bridge)
            now = self._clock()
            self._backend.start_activity(now)
            ok, err = self._backend.begin_collection(now)
        except Exception as e:
            try:
                self._backend.set_listener(None)
            except Exception:
                self._log.exception("LISTENER_UNREGISTER_ERROR")
            raise ConfigurationError(f"Backend failed to start the session: {e}") from e

        if not ok:
            # the platform session exists; stay active so stop() can tear it down
            self._log.error("WORKOUT_START_FAILED err=%s", err)
            return
        self._log.info("WORKOUT_STARTED")

    def _teardown(self) -> None:
        try:
            self._backend.end()
        except Exception:
            self._log.exception("SESSION_END_ERROR")

        try:
            ok, err = self._backend.end_collection(self._clock())
            if not ok:
                self._log.warning("END_COLLECTION_FAILED err=%s", err)
        except Exception:
            self._log.exception("END_COLLECTION_ERROR")

        # collection stream is closed: no new batches past this point
        try:
            self._backend.set_listener(None)
        except Exception:
            self._log.exception("LISTENER_UNREGISTER_ERROR")

        try:
            ok, err = self._backend.finish_session()
            if ok:
                self._log.info("WORKOUT_STOPPED")
            else:
                self._log.error("WORKOUT_STOP_FAILED err=%s", err)
        except Exception:
            self._log.exception("WORKOUT_STOP_ERROR")
