"""Play/pause toggle resolution strategies."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol, Tuple, Type

from .actions import ActionPayload, CanonicalAction, PlaybackState
from .host import ActionHost

LOGGER = logging.getLogger(__name__)

Resolution = Optional[Tuple[CanonicalAction, Optional[ActionPayload]]]


class ToggleStrategy(Protocol):
    """Decide which action, if any, a toggle trigger maps to."""

    name: str

    def resolve(self, host: ActionHost) -> Resolution:
        ...


class StateAwareToggle:
    """Choose ``play`` or ``pause`` from the host's last reported playback state.

    Correct only while the host keeps its playback state current: if the
    host never reports a change after acting, every toggle resolves the
    same way.
    """

    name = "state_aware"

    def resolve(self, host: ActionHost) -> Resolution:
        current = host.playback_state()
        LOGGER.debug("Current playback state: %s", current.value)
        if current == PlaybackState.PLAYING:
            if host.has_handler(CanonicalAction.PAUSE):
                LOGGER.debug("Toggle: pause (was playing)")
                return CanonicalAction.PAUSE, None
            return None
        if host.has_handler(CanonicalAction.PLAY):
            LOGGER.debug("Toggle: play (was not playing)")
            return CanonicalAction.PLAY, None
        if host.has_handler(CanonicalAction.PAUSE):
            # Single-handler hosts register their toggle under "pause".
            LOGGER.debug("Toggle: fallback to pause (no play handler)")
            return CanonicalAction.PAUSE, None
        return None


class FlagDelegatedToggle:
    """Leave disambiguation to the host by flagging ``pause`` as a toggle."""

    name = "flag_delegated"

    def resolve(self, host: ActionHost) -> Resolution:
        if host.has_handler(CanonicalAction.PAUSE):
            LOGGER.debug("Toggle: pause with toggle flag")
            return CanonicalAction.PAUSE, ActionPayload(toggle=True)
        if host.has_handler(CanonicalAction.PLAY):
            return CanonicalAction.PLAY, None
        return None


STRATEGIES: Dict[str, Type] = {
    StateAwareToggle.name: StateAwareToggle,
    FlagDelegatedToggle.name: FlagDelegatedToggle,
}

DEFAULT_STRATEGY = StateAwareToggle.name


def strategy_from_name(name: str) -> ToggleStrategy:
    """Instantiate a strategy by its config name."""
    key = str(name).strip().lower()
    try:
        return STRATEGIES[key]()
    except KeyError as exc:
        allowed = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown toggle strategy {name!r}; expected one of {allowed}") from exc


__all__ = [
    "DEFAULT_STRATEGY",
    "FlagDelegatedToggle",
    "Resolution",
    "StateAwareToggle",
    "ToggleStrategy",
    "strategy_from_name",
]
