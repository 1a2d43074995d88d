"""OSC event source feeding key events and transport callbacks to the dispatcher."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Optional, Tuple

from pythonosc import dispatcher
from pythonosc.osc_server import AsyncIOOSCUDPServer

from .dispatcher import ActionDispatcher
from .keys import KeyPhase, RawInputEvent, decode_key
from .state import HostState

LOGGER = logging.getLogger(__name__)


def _discard_result(handler: Callable[..., object]) -> Callable[..., None]:
    # python-osc treats a non-None return value as a reply to send back.
    def _handler(address: str, *args: object) -> None:
        handler(address, *args)

    return _handler


class OscEventSource:
    """Receives ``/key``, ``/callback``, ``/state`` and ``/handlers`` messages."""

    def __init__(
        self,
        host: str,
        port: int,
        action_dispatcher: ActionDispatcher,
        host_state: HostState,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self._loop = loop or asyncio.get_event_loop()
        self._address = (host, port)
        self._action_dispatcher = action_dispatcher
        self._host_state = host_state
        self._routes: Dict[str, Callable[..., object]] = {
            "/key": self._on_key,
            "/callback": self._on_callback,
            "/state": self._on_state,
            "/handlers": self._on_handlers,
        }
        self._dispatcher = dispatcher.Dispatcher()
        for address, handler in self._routes.items():
            self._dispatcher.map(address, _discard_result(handler))
        self._server = AsyncIOOSCUDPServer(self._address, self._dispatcher, self._loop)
        self._transport: Optional[asyncio.BaseTransport] = None
        self._protocol = None

    async def start(self) -> None:
        """Start listening for OSC messages."""
        if self._transport is not None:
            return
        self._transport, self._protocol = await self._server.create_serve_endpoint()
        LOGGER.info("OscEventSource listening on %s:%s", *self.address)

    async def stop(self) -> None:
        """Stop the OSC server."""
        if self._transport is None:
            return
        self._transport.close()
        self._transport = None
        self._protocol = None

    @property
    def address(self) -> Tuple[str, int]:
        """Return the configured OSC address tuple."""
        return self._address

    @property
    def local_address(self) -> Optional[Tuple[str, int]]:
        """Return the bound socket address once started (resolves port 0)."""
        if self._transport is None:
            return None
        sockname = self._transport.get_extra_info("sockname")
        return sockname[0], sockname[1]

    def inject(self, address: str, *args: object) -> object:
        """Testing helper to deliver a message without the UDP server."""
        handler = self._routes.get(address)
        if handler is None:
            LOGGER.debug("No route for %s", address)
            return None
        return handler(address, *args)

    # Handlers -----------------------------------------------------------------

    def _on_key(self, _addr: str, *args: object) -> bool:
        if not args:
            LOGGER.debug("Ignoring /key without key code")
            return self._action_dispatcher.handle_raw_event(None)
        try:
            key_code = decode_key(int(args[0]))  # type: ignore[arg-type]
            phase = int(args[1]) if len(args) > 1 else int(KeyPhase.DOWN)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            LOGGER.debug("Ignoring non-int key payload: %s", args)
            return False
        return self._action_dispatcher.handle_raw_event(RawInputEvent(key_code=key_code, phase=phase))

    def _on_callback(self, _addr: str, *args: object) -> bool:
        if not args:
            LOGGER.debug("Ignoring /callback without a name")
            return False
        return self._action_dispatcher.on_callback(str(args[0]), *args[1:])

    def _on_state(self, _addr: str, *args: object) -> None:
        if not args:
            LOGGER.debug("Ignoring /state without a value")
            return
        try:
            self._host_state.set_playback_state(args[0])
        except ValueError as exc:
            LOGGER.debug("Ignoring /state payload: %s", exc)
            return
        LOGGER.debug("Remote playback state: %s", self._host_state.playback_state.value)

    def _on_handlers(self, _addr: str, *args: object) -> None:
        try:
            self._host_state.replace_handled_actions(args)
        except ValueError as exc:
            LOGGER.debug("Ignoring /handlers payload: %s", exc)
            return
        LOGGER.info("Remote handlers: %s", sorted(a.value for a in self._host_state.handled_actions))


__all__ = ["OscEventSource"]
