"""MIDI Machine Control (MMC) input translated into media key presses."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Protocol

import mido

from .keys import KeyCode, RawInputEvent

LOGGER = logging.getLogger(__name__)

MMC_REALTIME_ID = 0x7F
MMC_COMMAND_SUB_ID = 0x06
MMC_ALL_CALL = 0x7F

MMC_COMMANDS: Dict[int, KeyCode] = {
    0x01: KeyCode.STOP,
    0x02: KeyCode.PLAY,
    0x03: KeyCode.PLAY,  # deferred play
    0x04: KeyCode.FAST_FORWARD,
    0x05: KeyCode.REWIND,
    0x09: KeyCode.PAUSE,
}

EventSink = Callable[[RawInputEvent], object]


class MidiInputPort(Protocol):
    """Subset of the mido input port API used by the node."""

    def close(self) -> None:
        ...


def decode_mmc(message: mido.Message, device_id: int = MMC_ALL_CALL) -> Optional[RawInputEvent]:
    """Return a key press for an MMC transport command, else ``None``.

    ``device_id`` of 0x7F accepts every device; any other value only accepts
    messages addressed to that device or to all-call.
    """
    if message.type != "sysex":
        return None
    data = tuple(message.data)
    if len(data) < 4 or data[0] != MMC_REALTIME_ID or data[2] != MMC_COMMAND_SUB_ID:
        return None
    target = data[1]
    if device_id != MMC_ALL_CALL and target not in (device_id, MMC_ALL_CALL):
        LOGGER.debug("Ignoring MMC for device %s", target)
        return None
    key_code = MMC_COMMANDS.get(data[3])
    if key_code is None:
        LOGGER.debug("Ignoring MMC command 0x%02X", data[3])
        return None
    return RawInputEvent.press(key_code)


class MmcListener:
    """Feeds decoded MMC key presses into ``sink``."""

    def __init__(self, sink: EventSink, device_id: int = MMC_ALL_CALL) -> None:
        if not 0 <= device_id <= 0x7F:
            raise ValueError(f"MMC device id must be 0-127, got {device_id}")
        self._sink = sink
        self._device_id = device_id

    def on_message(self, message: mido.Message) -> None:
        event = decode_mmc(message, self._device_id)
        if event is None:
            return
        LOGGER.debug("MMC key %s", event.key_code)
        self._sink(event)


def open_mmc_input(port_name: str, listener: MmcListener) -> MidiInputPort:
    """Open a MIDI input whose messages are delivered to ``listener`` on mido's thread."""
    try:
        return mido.open_input(port_name, callback=listener.on_message)
    except IOError as exc:  # pragma: no cover - depends on system ports
        available = ", ".join(mido.get_input_names())
        raise RuntimeError(
            f"Failed to open MIDI input '{port_name}'. Available ports: {available}"
        ) from exc


__all__ = ["MMC_COMMANDS", "MmcListener", "decode_mmc", "open_mmc_input"]
