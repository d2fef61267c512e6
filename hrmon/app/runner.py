# hrmon/app/runner.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from hrmon.app.config import MonitorConfig, load_config
from hrmon.app.coordinator import SessionCoordinator
from hrmon.backend.simulated import SimulatedWorkoutBackend
from hrmon.delivery.client import SampleDeliveryClient
from hrmon.interfaces.backend import WorkoutBackend


@dataclass(frozen=True)
class AppRun:
    coordinator: SessionCoordinator
    backend: WorkoutBackend
    delivery: SampleDeliveryClient
    config: MonitorConfig


def resolve_config(config_path: Optional[Path] = None) -> MonitorConfig:
    if config_path is None:
        return MonitorConfig()
    return load_config(config_path)


def start_run(
    cfg: MonitorConfig,
    *,
    backend: Optional[WorkoutBackend] = None,
    transport: Optional[httpx.BaseTransport] = None,
    seed: Optional[int] = None,
) -> AppRun:
    """
    Wire a coordinator for `cfg`. Without an explicit backend the simulated
    one is used. Authorization is requested up front; its outcome is logged only.
    """
    log = logging.getLogger(__name__)

    backend = backend or SimulatedWorkoutBackend(
        interval_s=cfg.simulation.interval_s,
        baseline_bpm=cfg.simulation.baseline_bpm,
        include_unrelated=cfg.simulation.include_unrelated,
        seed=seed,
    )

    delivery = SampleDeliveryClient(
        cfg.endpoint,
        transport=transport,
        logger=logging.getLogger("hrmon.delivery"),
    )

    coordinator = SessionCoordinator(
        cfg,
        backend=backend,
        delivery=delivery,
        logger=log,
    )
    coordinator.authorize()

    return AppRun(
        coordinator=coordinator,
        backend=backend,
        delivery=delivery,
        config=cfg,
    )
