from collections import deque
from typing import Callable, Dict, Iterable, Optional

import pytest

from drawpoker.deck import parse_cards
from drawpoker.hand import Hand
from drawpoker.player import Player


class SequentialActor:
    """Callable helper which returns predetermined decisions."""

    def __init__(self, actions: Iterable[Dict]):
        self._queue = deque(actions)
        self.states = []

    def next_action(self, state):
        self.states.append(state)
        if not self._queue:
            raise RuntimeError("No more scripted actions available")
        action = self._queue.popleft()
        if callable(action):
            return action(state)
        return action


@pytest.fixture
def make_player() -> Callable[..., Player]:
    """Factory for creating seated Player objects with deterministic actors.

    Seats are handed out in creation order.  `hand` is a card string such
    as "Ah Kd Qs Jc Th".
    """
    seats = iter(range(100))

    def _factory(name: str, chips: int = 200, actions: Optional[Iterable[Dict]] = None,
                 hand: Optional[str] = None) -> Player:
        player = Player(name, chips=chips, seat=next(seats))
        if actions is not None:
            actor = SequentialActor(actions)

            async def _actor_async(state):
                return actor.next_action(state)

            player.actor = _actor_async
            player.script = actor
        if hand is not None:
            player.hand = Hand(parse_cards(hand))
        return player

    return _factory
