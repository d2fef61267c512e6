# hrmon/common/logging_config.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

@dataclass(frozen=True)
class LogDefaults:
    level: str = "INFO"
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    filename_prefix: str = "hrmon"
    filename_ext: str = ".log"
    dirname: str = "logs"

DEFAULTS = LogDefaults()

def logs_root(base: Path | None = None) -> Path:
    root = (base or Path.cwd()) / DEFAULTS.dirname
    root.mkdir(parents=True, exist_ok=True)
    return root

def make_log_path(*, suffix: str | None = None, directory: Path | None = None) -> Path:
    from datetime import datetime
    root = directory if directory else logs_root()
    ts = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    base = f"{DEFAULTS.filename_prefix}_{ts}"
    if suffix:
        base += f"_{suffix}"
    return root / f"{base}{DEFAULTS.filename_ext}"

def configure_console_logging(level: Optional[str] = None) -> None:
    """Attach one stream handler to the root logger (idempotent)."""
    root = logging.getLogger()
    lvl = logging.getLevelName((level or DEFAULTS.level).upper())
    if not isinstance(lvl, int):
        raise ValueError(f"Unknown log level: {level}")

    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(lvl)
            break
    else:
        sh = logging.StreamHandler()
        sh.setLevel(lvl)
        sh.setFormatter(logging.Formatter(DEFAULTS.fmt))
        root.addHandler(sh)

    root.setLevel(lvl)

def configure_file_logging(app_log_path: Path) -> None:
    """Add a file handler to the root logger (idempotent)."""
    root = logging.getLogger()
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter(DEFAULTS.fmt))
    root.addHandler(fh)

    if root.level > logging.INFO:
        root.setLevel(logging.INFO)
