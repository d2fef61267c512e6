# hrmon/core/errors.py
from __future__ import annotations


class MonitorError(Exception):
    """
    Base class for all expected operational errors in hrmon.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, logs, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors
# ---------------------------------------------------------------------------

class ConfigurationError(MonitorError):
    """
    Configuration was rejected.

    Examples:
      - session backend refused the activity configuration
      - config file missing or malformed
      - endpoint port out of range
    """
    code = "configuration_error"


# ---------------------------------------------------------------------------
# Session lifecycle errors
# ---------------------------------------------------------------------------

class AlreadyRunning(MonitorError):
    """
    start() requested while a session is active or ending. Benign, no-op.
    """
    code = "already_running"


class NotRunning(MonitorError):
    """
    stop() (or any session-scoped operation) requested while idle. Benign, no-op.
    """
    code = "not_running"


# ---------------------------------------------------------------------------
# Data / delivery errors
# ---------------------------------------------------------------------------

class InvalidSample(MonitorError):
    """
    Sensor data cannot be turned into a reading.

    Examples:
      - unit not expressible as a rate
      - negative or non-finite rate
    """
    code = "invalid_sample"


class DeliveryFailure(MonitorError):
    """
    A single reading could not be delivered and was dropped.

    Examples:
      - malformed target URL
      - connection refused / timeout
      - non-2xx response
    """
    code = "delivery_failure"
