# hrmon/cli/commands.py
from __future__ import annotations

import argparse
import time
from dataclasses import replace

from hrmon.app.config import MonitorConfig
from hrmon.app.runner import resolve_config, start_run
from hrmon.common.logging_config import (
    configure_console_logging,
    configure_file_logging,
    make_log_path,
)
from hrmon.core.errors import ConfigurationError
from hrmon.delivery.client import SampleDeliveryClient
from hrmon.model.convert import to_per_minute
from hrmon.runtime.state import CoordinatorStatus


# ---------------- Config ----------------

def config_from_args(args: argparse.Namespace) -> MonitorConfig:
    cfg = resolve_config(getattr(args, "config", None))
    cfg = cfg.with_endpoint(
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
        base_path=getattr(args, "base_path", None),
        scheme=getattr(args, "scheme", None),
    )
    interval = getattr(args, "interval", None)
    if interval is not None:
        if interval <= 0:
            raise ConfigurationError("--interval must be > 0")
        cfg = replace(cfg, simulation=replace(cfg.simulation, interval_s=float(interval)))
    return cfg

# ---------------- Status printing ----------------

def print_status(st: CoordinatorStatus) -> None:
    s = st.session
    b = st.bridge
    d = st.delivery
    started = s.started_at.isoformat() if s.started_at else "-"
    print(f"Session:   state={s.state.value} started_at={started}")
    print(f"Batches:   seen={b.batches_seen} rejected={b.batches_rejected} "
          f"skipped={b.batches_skipped} readings={b.readings_emitted}")
    print(f"Delivery:  attempted={d.attempted} ok={d.succeeded} failed={d.failed} "
          f"dropped={d.dropped} in_flight={d.in_flight}")

# ---------------- Commands ----------------

def cmd_convert(args: argparse.Namespace) -> int:
    print(to_per_minute(args.rate))
    return 0


def cmd_url(args: argparse.Namespace) -> int:
    cfg = config_from_args(args)
    client = SampleDeliveryClient(cfg.endpoint)
    try:
        print(client.build_url(args.reading))
    finally:
        client.close()
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    configure_console_logging(args.log_level)
    if not args.no_log_file:
        configure_file_logging(args.log_file or make_log_path())

    cfg = config_from_args(args)
    run = start_run(cfg, seed=args.seed)
    coordinator = run.coordinator

    print(f"Delivering to {cfg.endpoint.base_url} (Ctrl+C to stop)")
    if not coordinator.start():
        run.delivery.close(timeout=0)
        print_status(coordinator.status())
        return 1

    try:
        deadline = time.monotonic() + max(0.0, float(args.secs))
        while time.monotonic() < deadline:
            time.sleep(0.1)
    except KeyboardInterrupt:
        print("Interrupted")
    finally:
        coordinator.stop()
        run.delivery.close(timeout=cfg.drain_timeout_s)

    print_status(coordinator.status())
    return 0
