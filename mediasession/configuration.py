"""Configuration loading and dataclasses for the media session node."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Tuple

import yaml

from .actions import CanonicalAction, PlaybackState, parse_action
from .toggle import DEFAULT_STRATEGY, STRATEGIES


@dataclass(frozen=True)
class DispatchConfig:
    toggle_strategy: str = DEFAULT_STRATEGY
    initial_state: PlaybackState = PlaybackState.NONE
    handlers: Tuple[CanonicalAction, ...] = ()

    def __post_init__(self) -> None:
        if self.toggle_strategy not in STRATEGIES:
            allowed = ", ".join(sorted(STRATEGIES))
            raise ValueError(f"toggle_strategy must be one of {allowed}, got {self.toggle_strategy!r}")


@dataclass(frozen=True)
class OscConfig:
    host: str
    port: int

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError(f"OSC port must be 1-65535, got {self.port}")


@dataclass(frozen=True)
class OscTargetConfig:
    enabled: bool
    host: str
    port: int


@dataclass(frozen=True)
class MidiConfig:
    enabled: bool = False
    input_port: str = ""
    device_id: int = 0x7F


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class AppConfig:
    dispatch: DispatchConfig
    osc: OscConfig
    osc_target: OscTargetConfig
    midi: MidiConfig
    logging: LoggingConfig


def load_config(path: Path) -> AppConfig:
    """Load configuration from a YAML file."""
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    try:
        osc = OscConfig(host=str(raw["osc"]["host"]), port=int(raw["osc"]["port"]))
    except KeyError as exc:
        raise KeyError(f"Config missing key: {exc}") from exc

    return AppConfig(
        dispatch=_parse_dispatch(raw.get("dispatch", {})),
        osc=osc,
        osc_target=_parse_osc_target(raw.get("osc_target", {})),
        midi=_parse_midi(raw.get("midi", {})),
        logging=LoggingConfig(level=str(raw.get("logging", {}).get("level", "INFO"))),
    )


def _parse_dispatch(raw: Any) -> DispatchConfig:
    if not isinstance(raw, dict):
        raw = {}
    return DispatchConfig(
        toggle_strategy=str(raw.get("toggle_strategy", DEFAULT_STRATEGY)).strip().lower(),
        initial_state=PlaybackState.parse(raw.get("initial_state", "none")),
        handlers=tuple(parse_action(name) for name in raw.get("handlers", []) or []),
    )


def _parse_osc_target(raw: Any) -> OscTargetConfig:
    if not isinstance(raw, dict):
        raw = {}
    return OscTargetConfig(
        enabled=bool(raw.get("enabled", False)),
        host=str(raw.get("host", "127.0.0.1")),
        port=int(raw.get("port", 9001)),
    )


def _parse_midi(raw: Any) -> MidiConfig:
    if not isinstance(raw, dict):
        raw = {}
    return MidiConfig(
        enabled=bool(raw.get("enabled", False)),
        input_port=str(raw.get("input_port", "")),
        device_id=int(raw.get("device_id", 0x7F)),
    )


def load_default_config() -> AppConfig:
    """Load the default config.yaml shipped with the package."""
    path = Path(__file__).resolve().parent / "config.yaml"
    return load_config(path)


__all__ = [
    "AppConfig",
    "DispatchConfig",
    "LoggingConfig",
    "MidiConfig",
    "OscConfig",
    "OscTargetConfig",
    "load_config",
    "load_default_config",
]
