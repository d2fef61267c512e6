from .config import MonitorConfig, ActivityConfig, SimulationConfig, load_config, config_from_dict
from .coordinator import SessionCoordinator
from .runner import AppRun, start_run

__all__ = [
    "MonitorConfig", "ActivityConfig", "SimulationConfig", "load_config", "config_from_dict",
    "SessionCoordinator",
    "AppRun", "start_run",
]
