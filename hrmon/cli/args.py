# hrmon/cli/args.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hrmon")
    sub = parser.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=None, help="YAML config file.")
    common.add_argument("--host", default=None, help="Endpoint host (overrides config).")
    common.add_argument("--port", type=int, default=None, help="Endpoint port (overrides config).")
    common.add_argument("--base-path", dest="base_path", default=None,
                        help="Endpoint base path (overrides config).")
    common.add_argument("--scheme", choices=("http", "https"), default=None)

    p_convert = sub.add_parser("convert", help="Convert a rate in events/s to events/min.")
    p_convert.add_argument("rate", type=float)

    p_url = sub.add_parser("url", parents=[common], help="Print the delivery URL for a reading.")
    p_url.add_argument("reading", type=int)

    p_run = sub.add_parser("run", parents=[common], help="Run one session on the simulated backend.")
    p_run.add_argument("--secs", type=float, default=10.0, help="Session length in seconds.")
    p_run.add_argument("--interval", type=float, default=None,
                       help="Seconds between simulated batches (overrides config).")
    p_run.add_argument("--seed", type=int, default=None)
    p_run.add_argument("--log-level", default="INFO")
    p_run.add_argument("--log-file", type=Path, default=None,
                       help="Also log to this file (default: logs/hrmon_<ts>.log).")
    p_run.add_argument("--no-log-file", action="store_true")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
