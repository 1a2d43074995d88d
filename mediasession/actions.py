"""Canonical action vocabulary, payloads and playback states."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class CanonicalAction(str, Enum):
    """Closed set of action tokens a host application can subscribe to."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    NEXT_TRACK = "nexttrack"
    PREVIOUS_TRACK = "previoustrack"
    SEEK_FORWARD = "seekforward"
    SEEK_BACKWARD = "seekbackward"
    SEEK_TO = "seekto"


class PlaybackState(str, Enum):
    """Coarse transport status last reported by the host."""

    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    NONE = "none"

    @classmethod
    def parse(cls, value: object) -> "PlaybackState":
        """Parse a state name such as ``"playing"``; raises ValueError if unknown."""
        if isinstance(value, PlaybackState):
            return value
        key = str(value).strip().lower()
        try:
            return cls(key)
        except ValueError as exc:
            allowed = ", ".join(state.value for state in cls)
            raise ValueError(f"Unknown playback state {value!r}; expected one of {allowed}") from exc


@dataclass(frozen=True)
class ActionPayload:
    """Optional data attached to a dispatched action."""

    seek_time: Optional[float] = None
    toggle: bool = False

    @classmethod
    def from_position_ms(cls, position_ms: int) -> "ActionPayload":
        return cls(seek_time=position_ms / 1000.0)

    def to_dict(self) -> Dict[str, Any]:
        """Return the host-facing representation (``seekTime`` / ``toggle`` keys)."""
        data: Dict[str, Any] = {}
        if self.seek_time is not None:
            data["seekTime"] = self.seek_time
        if self.toggle:
            data["toggle"] = True
        return data


def parse_action(value: object) -> CanonicalAction:
    """Parse an action token; raises ValueError for names outside the vocabulary."""
    if isinstance(value, CanonicalAction):
        return value
    try:
        return CanonicalAction(str(value).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown action {value!r}") from exc


__all__ = ["ActionPayload", "CanonicalAction", "PlaybackState", "parse_action"]
