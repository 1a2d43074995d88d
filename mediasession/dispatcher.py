"""Normalise media-button events and session callbacks into canonical actions."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

from .actions import ActionPayload, CanonicalAction
from .host import ActionHost
from .keys import KeyCode, RawInputEvent, TOGGLE_KEYS
from .toggle import StateAwareToggle, ToggleStrategy

LOGGER = logging.getLogger(__name__)

DIRECT_KEYS: Dict[KeyCode, CanonicalAction] = {
    KeyCode.STOP: CanonicalAction.STOP,
    KeyCode.NEXT: CanonicalAction.NEXT_TRACK,
    KeyCode.PREVIOUS: CanonicalAction.PREVIOUS_TRACK,
    KeyCode.FAST_FORWARD: CanonicalAction.SEEK_FORWARD,
    KeyCode.REWIND: CanonicalAction.SEEK_BACKWARD,
}

DIRECT_CALLBACKS: Dict[str, CanonicalAction] = {
    "onPlay": CanonicalAction.PLAY,
    "onPause": CanonicalAction.PAUSE,
    "onStop": CanonicalAction.STOP,
    "onRewind": CanonicalAction.SEEK_BACKWARD,
    "onFastForward": CanonicalAction.SEEK_FORWARD,
    "onSkipToPrevious": CanonicalAction.PREVIOUS_TRACK,
    "onSkipToNext": CanonicalAction.NEXT_TRACK,
}


def _position_ms(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None


class ActionDispatcher:
    """Translates raw key events and transport callbacks into host dispatches.

    Every entry point runs synchronously to completion. Nothing here raises
    for bad input: undecodable or unknown keys report ``False`` and missing
    handlers simply mean nothing is dispatched.
    """

    def __init__(self, host: ActionHost, toggle: Optional[ToggleStrategy] = None) -> None:
        self._host = host
        self._toggle = toggle or StateAwareToggle()
        # name -> (callback, positional argument count)
        self._callbacks: Dict[str, Tuple[Callable[..., None], int]] = {
            name: (self._direct(action), 0) for name, action in DIRECT_CALLBACKS.items()
        }
        self._callbacks["onSeekTo"] = (self.on_seek_to, 1)

    @property
    def toggle(self) -> ToggleStrategy:
        return self._toggle

    def handle_raw_event(self, event: Optional[RawInputEvent]) -> bool:
        """Handle a media-button event; return whether it was consumed."""
        if event is None or event.key_code is None:
            LOGGER.warning("Received media button event with no key event")
            return False
        if not event.is_press:
            return False

        LOGGER.debug("Media button event: %s", int(event.key_code))
        if event.key_code in TOGGLE_KEYS:
            # Bluetooth devices often send PLAY/PAUSE alternately instead of PLAY_PAUSE.
            self.resolve_toggle()
            return True
        action = DIRECT_KEYS.get(event.key_code)  # type: ignore[call-overload]
        if action is None:
            LOGGER.warning("Unhandled media button: %s", int(event.key_code))
            return False
        self._host.dispatch(action)
        return True

    def resolve_toggle(self) -> Optional[CanonicalAction]:
        """Resolve a toggle trigger and dispatch the result; returns the action sent."""
        LOGGER.debug("Handling play/pause toggle via %s", self._toggle.name)
        resolution = self._toggle.resolve(self._host)
        if resolution is None:
            LOGGER.debug("Toggle resolved to nothing")
            return None
        action, payload = resolution
        self._host.dispatch(action, payload)
        return action

    # Transport callbacks ------------------------------------------------------

    def on_play(self) -> None:
        self._callbacks["onPlay"][0]()

    def on_pause(self) -> None:
        self._callbacks["onPause"][0]()

    def on_stop(self) -> None:
        self._callbacks["onStop"][0]()

    def on_rewind(self) -> None:
        self._callbacks["onRewind"][0]()

    def on_fast_forward(self) -> None:
        self._callbacks["onFastForward"][0]()

    def on_skip_to_previous(self) -> None:
        self._callbacks["onSkipToPrevious"][0]()

    def on_skip_to_next(self) -> None:
        self._callbacks["onSkipToNext"][0]()

    def on_seek_to(self, position_ms: int) -> None:
        """Dispatch ``seekto`` with the position converted to seconds."""
        LOGGER.debug("onSeekTo() called with position: %s", position_ms)
        self._host.dispatch(CanonicalAction.SEEK_TO, ActionPayload.from_position_ms(position_ms))

    def on_callback(self, name: str, *args: object) -> bool:
        """Invoke a transport callback by name (``"onPlay"``, ``"onSeekTo"``, ...).

        Unknown names, a wrong argument count or a non-numeric seek position
        are logged and reported as ``False``.
        """
        entry = self._callbacks.get(name)
        if entry is None:
            LOGGER.warning("Unknown transport callback: %s", name)
            return False
        callback, arity = entry
        if len(args) != arity:
            LOGGER.warning("%s expects %d argument(s), got %d", name, arity, len(args))
            return False
        if name == "onSeekTo":
            position = _position_ms(args[0])
            if position is None:
                LOGGER.warning("Rejected onSeekTo position: %r", args[0])
                return False
            args = (position,)
        callback(*args)
        return True

    def _direct(self, action: CanonicalAction) -> Callable[[], None]:
        def _callback() -> None:
            LOGGER.debug("%s callback", action.value)
            self._host.dispatch(action)

        return _callback


__all__ = ["ActionDispatcher", "DIRECT_CALLBACKS", "DIRECT_KEYS"]
