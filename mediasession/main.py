"""Entrypoint for the media session node."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Tuple

from .configuration import AppConfig, load_config, load_default_config
from .dispatcher import ActionDispatcher
from .host import ActionDetails, ActionHost, CallbackHost
from .keys import RawInputEvent
from .midi_transport import MidiInputPort, MmcListener, open_mmc_input
from .osc_receiver import OscEventSource
from .osc_sender import ActionTx, OscForwardingHost
from .state import HostState
from .toggle import strategy_from_name

LOGGER = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Media button to canonical action bridge.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration YAML. Defaults to bundled config.yaml if omitted.",
    )
    return parser.parse_args()


def _log_action(details: ActionDetails) -> None:
    LOGGER.info("Action: %s", details)


def build_host(config: AppConfig) -> Tuple[ActionHost, HostState, Optional[ActionTx]]:
    """Create the host boundary: OSC forwarding when enabled, else a logging host."""
    dispatch = config.dispatch
    state = HostState(playback_state=dispatch.initial_state, handled_actions=set(dispatch.handlers))
    target = config.osc_target
    if target.enabled:
        tx = ActionTx(target.host, target.port)
        return OscForwardingHost(tx, state), state, tx

    host = CallbackHost(HostState(playback_state=dispatch.initial_state))
    for action in dispatch.handlers:
        host.set_action_handler(action, _log_action)
    return host, host.state, None


def build_dispatcher(config: AppConfig, host: ActionHost) -> ActionDispatcher:
    return ActionDispatcher(host, strategy_from_name(config.dispatch.toggle_strategy))


def _open_midi(
    config: AppConfig,
    action_dispatcher: ActionDispatcher,
    loop: asyncio.AbstractEventLoop,
) -> Optional[MidiInputPort]:
    if not config.midi.enabled:
        return None

    # mido calls back on its own thread; hop onto the loop before dispatching.
    def sink(event: RawInputEvent) -> None:
        loop.call_soon_threadsafe(action_dispatcher.handle_raw_event, event)

    port = open_mmc_input(config.midi.input_port, MmcListener(sink, config.midi.device_id))
    LOGGER.info("MMC input opened on %s", config.midi.input_port)
    return port


async def async_main(args: argparse.Namespace) -> None:
    config = load_config(args.config) if args.config else load_default_config()
    logging.basicConfig(level=getattr(logging, config.logging.level.upper(), logging.INFO))

    loop = asyncio.get_running_loop()
    host, state, tx = build_host(config)
    action_dispatcher = build_dispatcher(config, host)
    LOGGER.info("Toggle strategy: %s", action_dispatcher.toggle.name)
    source = OscEventSource(config.osc.host, config.osc.port, action_dispatcher, state, loop=loop)
    midi_port: Optional[MidiInputPort] = None
    try:
        await source.start()
        midi_port = _open_midi(config, action_dispatcher, loop)
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        LOGGER.info("Media session node cancelled")
        raise
    finally:
        await source.stop()
        if midi_port is not None:
            midi_port.close()
        if tx is not None:
            tx.close()


def main() -> None:
    args = parse_args()
    try:
        asyncio.run(async_main(args))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted by user")


if __name__ == "__main__":
    main()
