"""Raw media-button events and key code decoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Union


class KeyCode(IntEnum):
    """Media key codes, numbered as Android's ``KeyEvent.KEYCODE_MEDIA_*``."""

    PLAY_PAUSE = 85
    STOP = 86
    NEXT = 87
    PREVIOUS = 88
    REWIND = 89
    FAST_FORWARD = 90
    PLAY = 126
    PAUSE = 127


class KeyPhase(IntEnum):
    """Key action phase; only ``DOWN`` triggers a dispatch."""

    DOWN = 0
    UP = 1


TOGGLE_KEYS = frozenset({KeyCode.PLAY, KeyCode.PAUSE, KeyCode.PLAY_PAUSE})


@dataclass(frozen=True)
class RawInputEvent:
    """A hardware key signal as delivered by an event source.

    ``key_code`` is ``None`` when the source could not decode a key at all.
    Unrecognised integer codes are kept as plain ints.
    """

    key_code: Optional[Union[KeyCode, int]]
    phase: Union[KeyPhase, int] = KeyPhase.DOWN

    @classmethod
    def press(cls, key_code: Union[KeyCode, int]) -> "RawInputEvent":
        return cls(key_code=decode_key(key_code), phase=KeyPhase.DOWN)

    @classmethod
    def release(cls, key_code: Union[KeyCode, int]) -> "RawInputEvent":
        return cls(key_code=decode_key(key_code), phase=KeyPhase.UP)

    @property
    def is_press(self) -> bool:
        return self.phase == KeyPhase.DOWN


def decode_key(value: Union[KeyCode, int]) -> Union[KeyCode, int]:
    """Return the matching KeyCode member, or the raw int for unknown codes."""
    code = int(value)
    try:
        return KeyCode(code)
    except ValueError:
        return code


__all__ = ["KeyCode", "KeyPhase", "RawInputEvent", "TOGGLE_KEYS", "decode_key"]
