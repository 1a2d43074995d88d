"""Host boundary consumed by the dispatcher, plus an in-process implementation."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Protocol

from .actions import ActionPayload, CanonicalAction, PlaybackState, parse_action
from .state import HostState

LOGGER = logging.getLogger(__name__)

ActionDetails = Dict[str, Any]
ActionHandler = Callable[[ActionDetails], None]


class ActionHost(Protocol):
    """Read-only state queries plus the fire-and-forget dispatch sink."""

    def playback_state(self) -> PlaybackState:
        ...

    def has_handler(self, action: CanonicalAction) -> bool:
        ...

    def dispatch(self, action: CanonicalAction, payload: Optional[ActionPayload] = None) -> None:
        ...


def action_details(action: CanonicalAction, payload: Optional[ActionPayload] = None) -> ActionDetails:
    """Build the dict handed to handlers, e.g. ``{"action": "seekto", "seekTime": 1.5}``."""
    details: ActionDetails = {"action": action.value}
    if payload is not None:
        details.update(payload.to_dict())
    return details


class CallbackHost:
    """Routes dispatched actions to Python callables registered per action.

    The host owns the playback state. Applications must call
    :meth:`set_playback_state` after acting on ``play``/``pause``; toggle
    resolution reads whatever was last stored here.

    :attr:`state` is the registry the dispatcher sees. Registering a callable
    adds its action; a ``/handlers`` report replacing the set can withdraw an
    action without removing the callable, and such actions are not called.
    """

    def __init__(self, state: Optional[HostState] = None) -> None:
        self._state = state or HostState()
        self._handlers: Dict[CanonicalAction, ActionHandler] = {}

    @property
    def state(self) -> HostState:
        return self._state

    def set_action_handler(self, action: object, handler: Optional[ActionHandler]) -> None:
        """Register ``handler`` for ``action``; ``None`` removes the registration."""
        key = parse_action(action)
        if handler is None:
            self._handlers.pop(key, None)
            self._state.handled_actions.discard(key)
            LOGGER.debug("Handler removed for %s", key.value)
            return
        self._handlers[key] = handler
        self._state.handled_actions.add(key)
        LOGGER.debug("Handler registered for %s", key.value)

    def set_playback_state(self, state: object) -> None:
        self._state.set_playback_state(state)
        LOGGER.debug("Playback state set to %s", self._state.playback_state.value)

    def playback_state(self) -> PlaybackState:
        return self._state.playback_state

    def has_handler(self, action: CanonicalAction) -> bool:
        return action in self._state.handled_actions

    def dispatch(self, action: CanonicalAction, payload: Optional[ActionPayload] = None) -> None:
        handler = self._handlers.get(action)
        if handler is None or action not in self._state.handled_actions:
            LOGGER.debug("No handler for %s; dropping", action.value)
            return
        try:
            handler(action_details(action, payload))
        except Exception:
            LOGGER.exception("Handler for %s raised", action.value)


__all__ = ["ActionDetails", "ActionHandler", "ActionHost", "CallbackHost", "action_details"]
