"""Tests for the OSC event source and action forwarding."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest
from pythonosc.udp_client import SimpleUDPClient

from mediasession.actions import ActionPayload, CanonicalAction, PlaybackState
from mediasession.dispatcher import ActionDispatcher
from mediasession.host import CallbackHost
from mediasession.osc_receiver import OscEventSource
from mediasession.osc_sender import ActionTx, OscForwardingHost, action_message
from mediasession.state import HostState


@dataclass
class FakeClient:
    messages: list = field(default_factory=list)

    def send_message(self, address, value) -> None:
        self.messages.append((address, value))


@pytest.fixture
def event_loop() -> asyncio.AbstractEventLoop:
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


def make_source(event_loop, make_host, state=PlaybackState.NONE, handlers=CanonicalAction, port=9000):
    host = make_host(state, handlers)
    host_state = HostState(playback_state=state)
    source = OscEventSource("127.0.0.1", port, ActionDispatcher(host), host_state, loop=event_loop)
    return source, host, host_state


def test_key_message_resolves_toggle(event_loop, make_host) -> None:
    source, host, _ = make_source(event_loop, make_host, state=PlaybackState.PLAYING)
    assert source.inject("/key", 85, 0) is True
    assert host.dispatched == [(CanonicalAction.PAUSE, None)]


def test_key_message_defaults_to_press(event_loop, make_host) -> None:
    source, host, _ = make_source(event_loop, make_host)
    assert source.inject("/key", 86) is True
    assert source.inject("/key", 86, 1) is False
    assert host.dispatched == [(CanonicalAction.STOP, None)]


def test_malformed_key_payloads_are_ignored(event_loop, make_host) -> None:
    source, host, _ = make_source(event_loop, make_host)
    assert source.inject("/key") is False
    assert source.inject("/key", "next") is False
    assert host.dispatched == []


def test_callback_messages(event_loop, make_host) -> None:
    source, host, _ = make_source(event_loop, make_host)
    assert source.inject("/callback", "onStop") is True
    assert source.inject("/callback", "onSeekTo", 1500) is True
    assert source.inject("/callback", "onSeekTo") is False
    assert source.inject("/callback", "onBogus") is False
    assert host.dispatched[0] == (CanonicalAction.STOP, None)
    assert host.dispatched[1][1].seek_time == pytest.approx(1.5)
    assert len(host.dispatched) == 2


def test_state_and_handler_reports_update_host_state(event_loop, make_host) -> None:
    source, _, host_state = make_source(event_loop, make_host)
    source.inject("/state", "playing")
    assert host_state.playback_state is PlaybackState.PLAYING
    source.inject("/state", "buffering")
    assert host_state.playback_state is PlaybackState.PLAYING

    source.inject("/handlers", "play", "pause")
    assert host_state.handled_actions == {CanonicalAction.PLAY, CanonicalAction.PAUSE}
    source.inject("/handlers", "play", "shuffle")
    assert host_state.handled_actions == {CanonicalAction.PLAY, CanonicalAction.PAUSE}


def test_action_message_encoding() -> None:
    assert action_message(CanonicalAction.NEXT_TRACK) == ("/action", ("nexttrack",))
    assert action_message(CanonicalAction.SEEK_TO, ActionPayload(seek_time=1.5)) == ("/action", ("seekto", 1.5))
    assert action_message(CanonicalAction.PAUSE, ActionPayload(toggle=True)) == ("/action", ("pause", 1))


def test_forwarding_host_sends_actions() -> None:
    client = FakeClient()
    tx = ActionTx("127.0.0.1", 9001, client=client)
    state = HostState(playback_state=PlaybackState.PLAYING, handled_actions={CanonicalAction.PAUSE})
    host = OscForwardingHost(tx, state)
    dispatcher = ActionDispatcher(host)

    dispatcher.resolve_toggle()
    dispatcher.on_seek_to(2000)
    tx.close()

    assert client.messages == [("/action", ["pause"]), ("/action", ["seekto", 2.0])]


def test_forwarding_host_reads_reported_state() -> None:
    tx = ActionTx("127.0.0.1", 9001, client=FakeClient())
    host = OscForwardingHost(tx)
    assert host.playback_state() is PlaybackState.NONE
    assert host.has_handler(CanonicalAction.PLAY) is False
    host.state.set_playback_state("paused")
    host.state.replace_handled_actions(["play"])
    assert host.playback_state() is PlaybackState.PAUSED
    assert host.has_handler(CanonicalAction.PLAY) is True
    tx.close()


def test_send_after_close_is_dropped() -> None:
    client = FakeClient()
    tx = ActionTx("127.0.0.1", 9001, client=client)
    tx.close()
    assert tx.send_action(CanonicalAction.STOP) is False
    assert client.messages == []


def test_udp_datagrams_reach_dispatcher(event_loop, make_host) -> None:
    source, host, host_state = make_source(event_loop, make_host, port=0)
    loop_errors = []
    event_loop.set_exception_handler(lambda _loop, context: loop_errors.append(context))

    async def exchange() -> None:
        await source.start()
        client = SimpleUDPClient(*source.local_address)
        client.send_message("/key", [86, 0])
        client.send_message("/callback", ["onSeekTo", 1500])
        client.send_message("/callback", ["onSeekTo"])
        client.send_message("/state", "playing")
        for _ in range(100):
            if len(host.dispatched) >= 2 and host_state.playback_state is PlaybackState.PLAYING:
                break
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.05)
        await source.stop()

    event_loop.run_until_complete(exchange())

    assert loop_errors == []
    assert host.dispatched[0] == (CanonicalAction.STOP, None)
    assert host.dispatched[1][0] is CanonicalAction.SEEK_TO
    assert host.dispatched[1][1].seek_time == pytest.approx(1.5)
    assert len(host.dispatched) == 2
    assert host_state.playback_state is PlaybackState.PLAYING


def test_handler_report_reaches_callback_host(event_loop) -> None:
    host = CallbackHost()
    received = []
    host.set_action_handler("play", received.append)
    host.set_action_handler("pause", received.append)
    source = OscEventSource("127.0.0.1", 9000, ActionDispatcher(host), host.state, loop=event_loop)

    source.inject("/handlers", "pause")
    assert host.has_handler(CanonicalAction.PLAY) is False
    assert host.has_handler(CanonicalAction.PAUSE) is True

    assert source.inject("/key", 85) is True
    assert received == [{"action": "pause"}]


def test_send_errors_are_reported() -> None:
    class FailingClient:
        def send_message(self, address, value) -> None:
            raise OSError("network unreachable")

    tx = ActionTx("127.0.0.1", 9001, client=FailingClient())
    assert tx.send_action(CanonicalAction.PLAY) is False
