"""Dataclasses modelling host-side playback state and handler registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Set

from .actions import CanonicalAction, PlaybackState, parse_action


@dataclass
class HostState:
    """Snapshot and registry maintained by the host, read by the dispatcher."""

    playback_state: PlaybackState = PlaybackState.NONE
    handled_actions: Set[CanonicalAction] = field(default_factory=set)

    def set_playback_state(self, state: object) -> None:
        self.playback_state = PlaybackState.parse(state)

    def replace_handled_actions(self, actions: Iterable[object]) -> None:
        self.handled_actions = {parse_action(action) for action in actions}
