"""Forward dispatched actions to a remote host over OSC."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol, Tuple

from pythonosc.udp_client import SimpleUDPClient

from .actions import ActionPayload, CanonicalAction, PlaybackState
from .state import HostState

LOGGER = logging.getLogger(__name__)


def _log_event(event: str, **fields: object) -> None:
    LOGGER.info(json.dumps({"event": event, **fields}))


class OscClient(Protocol):
    def send_message(self, address: str, value: Any) -> None:
        ...


def action_message(action: CanonicalAction, payload: Optional[ActionPayload] = None) -> Tuple[str, Tuple[object, ...]]:
    """Encode an action as ``/action <name> [seekTime | 1]``."""
    args: Tuple[object, ...] = (action.value,)
    if payload is not None:
        if payload.seek_time is not None:
            args += (float(payload.seek_time),)
        elif payload.toggle:
            args += (1,)
    return "/action", args


class ActionTx:
    """Sends each dispatched action as one UDP datagram.

    Dispatches arrive on the event loop thread and a UDP send does not block
    on the peer, so messages go out directly. Send failures are logged and
    reported as ``False``; nothing is sent after :meth:`close`.
    """

    def __init__(self, ip: str, port: int, client: Optional[OscClient] = None) -> None:
        self._client = client or SimpleUDPClient(ip, port)
        self._target = (ip, port)
        self._closed = False
        _log_event("osc_tx_started", ip=ip, port=port)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        _log_event("osc_tx_stopped")

    def send_action(self, action: CanonicalAction, payload: Optional[ActionPayload] = None) -> bool:
        if self._closed:
            _log_event("osc_drop_action", action=action.value, reason="closed")
            return False
        address, args = action_message(action, payload)
        try:
            self._client.send_message(address, list(args))
        except OSError as exc:
            _log_event("osc_send_error", address=address, target=list(self._target), error=str(exc))
            return False
        return True


class OscForwardingHost:
    """Host boundary for a remote application reachable over OSC.

    The remote side reports its playback state and handled actions back via
    ``/state`` and ``/handlers``; both land in :attr:`state`.
    """

    def __init__(self, tx: ActionTx, state: Optional[HostState] = None) -> None:
        self._tx = tx
        self._state = state or HostState()

    @property
    def state(self) -> HostState:
        return self._state

    def playback_state(self) -> PlaybackState:
        return self._state.playback_state

    def has_handler(self, action: CanonicalAction) -> bool:
        return action in self._state.handled_actions

    def dispatch(self, action: CanonicalAction, payload: Optional[ActionPayload] = None) -> None:
        LOGGER.debug("Forwarding %s", action.value)
        self._tx.send_action(action, payload)


__all__ = ["ActionTx", "OscForwardingHost", "action_message"]
