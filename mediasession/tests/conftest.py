"""Shared fake collaborators for dispatcher tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

import pytest

from mediasession.actions import ActionPayload, CanonicalAction, PlaybackState


@dataclass
class FakeHost:
    state: PlaybackState = PlaybackState.NONE
    handlers: Set[CanonicalAction] = field(default_factory=set)
    dispatched: List[Tuple[CanonicalAction, Optional[ActionPayload]]] = field(default_factory=list)

    def playback_state(self) -> PlaybackState:
        return self.state

    def has_handler(self, action: CanonicalAction) -> bool:
        return action in self.handlers

    def dispatch(self, action: CanonicalAction, payload: Optional[ActionPayload] = None) -> None:
        self.dispatched.append((action, payload))


@pytest.fixture
def make_host():
    """Factory for FakeHost instances with the given state and handlers."""

    def _make(state: PlaybackState = PlaybackState.NONE, handlers=()) -> FakeHost:
        return FakeHost(state=state, handlers=set(handlers))

    return _make
