from .endpoint import EndpointConfig
from .task import DeliveryTask, DeliveryOutcome
from .client import SampleDeliveryClient

__all__ = ["EndpointConfig", "DeliveryTask", "DeliveryOutcome", "SampleDeliveryClient"]
