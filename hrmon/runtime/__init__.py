from .state import SessionState, SessionSnapshot, BridgeStats, DeliveryStats, CoordinatorStatus
from .state_machine import SessionStateMachine
from .bridge import CollectionBridge

__all__ = [
    "SessionState", "SessionSnapshot", "BridgeStats", "DeliveryStats", "CoordinatorStatus",
    "SessionStateMachine",
    "CollectionBridge",
]
