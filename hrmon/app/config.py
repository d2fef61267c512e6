# hrmon/app/config.py
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from hrmon.core.errors import ConfigurationError
from hrmon.delivery.endpoint import EndpointConfig
from hrmon.interfaces.backend import ActivityConfiguration
from hrmon.model.sample import ACTIVITY_WALKING, HEART_RATE, LOCATION_OUTDOOR


@dataclass(frozen=True)
class ActivityConfig:
    activity_kind: str = ACTIVITY_WALKING
    location_kind: str = LOCATION_OUTDOOR
    quantity_type: str = HEART_RATE

    def to_backend(self) -> ActivityConfiguration:
        return ActivityConfiguration(
            activity_kind=self.activity_kind,
            location_kind=self.location_kind,
            quantity_type=self.quantity_type,
        )


@dataclass(frozen=True)
class SimulationConfig:
    interval_s: float = 1.0
    baseline_bpm: float = 72.0
    include_unrelated: bool = True


@dataclass(frozen=True)
class MonitorConfig:
    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    activity: ActivityConfig = field(default_factory=ActivityConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    drain_timeout_s: float = 2.0

    def with_endpoint(self, **overrides: Any) -> "MonitorConfig":
        """Copy with non-None endpoint fields replaced (CLI overrides)."""
        clean = {k: v for k, v in overrides.items() if v is not None}
        if not clean:
            return self
        endpoint = _build(EndpointConfig, {**_as_dict(self.endpoint), **clean}, "endpoint")
        return replace(self, endpoint=endpoint)


# ---------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------

def _as_dict(obj: Any) -> dict:
    return {f.name: getattr(obj, f.name) for f in fields(obj)}


def _build(cls, data: Mapping[str, Any], section: str):
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"'{section}' must be a mapping")

    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in '{section}': {', '.join(unknown)}",
            hint=f"Allowed: {', '.join(sorted(known))}",
        )

    defaults = cls()
    kwargs = {}
    for name, value in data.items():
        expected = type(getattr(defaults, name))
        try:
            if expected is bool:
                if not isinstance(value, bool):
                    raise ValueError(f"expected true/false, got {value!r}")
                kwargs[name] = value
            else:
                kwargs[name] = expected(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for '{section}.{name}': {e}") from e

    obj = cls(**kwargs)
    _validate(obj, section)
    return obj


def _validate(obj: Any, section: str) -> None:
    if isinstance(obj, EndpointConfig):
        if obj.scheme not in ("http", "https"):
            raise ConfigurationError(f"'{section}.scheme' must be http or https, got '{obj.scheme}'")
        if not obj.host:
            raise ConfigurationError(f"'{section}.host' must not be empty")
        if not (0 < obj.port < 65536):
            raise ConfigurationError(f"'{section}.port' out of range: {obj.port}")
        if "{reading}" not in obj.path_template:
            raise ConfigurationError(f"'{section}.path_template' must contain '{{reading}}'")
        if obj.timeout_s <= 0:
            raise ConfigurationError(f"'{section}.timeout_s' must be > 0")
        if obj.max_workers < 1:
            raise ConfigurationError(f"'{section}.max_workers' must be >= 1")
    elif isinstance(obj, ActivityConfig):
        if not obj.quantity_type:
            raise ConfigurationError(f"'{section}.quantity_type' must not be empty")
    elif isinstance(obj, SimulationConfig):
        if obj.interval_s <= 0:
            raise ConfigurationError(f"'{section}.interval_s' must be > 0")


def config_from_dict(data: Optional[Mapping[str, Any]]) -> MonitorConfig:
    data = dict(data or {})
    allowed = {"endpoint", "activity", "simulation", "drain_timeout_s"}
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigurationError(f"Unknown top-level key(s): {', '.join(unknown)}")

    try:
        drain = float(data.get("drain_timeout_s", MonitorConfig.drain_timeout_s))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for 'drain_timeout_s': {e}") from e

    return MonitorConfig(
        endpoint=_build(EndpointConfig, data.get("endpoint") or {}, "endpoint"),
        activity=_build(ActivityConfig, data.get("activity") or {}, "activity"),
        simulation=_build(SimulationConfig, data.get("simulation") or {}, "simulation"),
        drain_timeout_s=drain,
    )


def load_config(path: str | Path) -> MonitorConfig:
    full_path = Path(path)
    if not full_path.exists():
        raise ConfigurationError(f"Missing config file: {full_path}")

    try:
        with open(full_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {full_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{full_path} must contain a mapping at the root")

    return config_from_dict(data)
