from .errors import (
    MonitorError,
    ConfigurationError,
    AlreadyRunning,
    NotRunning,
    InvalidSample,
    DeliveryFailure,
)

__all__ = [
    "MonitorError",
    "ConfigurationError",
    "AlreadyRunning",
    "NotRunning",
    "InvalidSample",
    "DeliveryFailure",
]
