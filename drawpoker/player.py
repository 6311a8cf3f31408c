"""
Player model and seating for draw poker.

A Player has a pluggable `actor` callable that decides actions.  Human
players get an actor that prompts on a terminal; tests plug in scripted
actors.  The engines reach a decision only through `take_action`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional

from drawpoker.hand import Hand

MAX_NAME_LENGTH = 20


class Player:
    def __init__(self, name: str, chips: int = 200, seat: int = 0):
        self.name = name
        self.seat = seat
        self.chips = chips
        self.hand: Optional[Hand] = None
        self.folded: bool = False
        self.all_in: bool = False
        self.contributed_this_round: int = 0
        self.contributed_total: int = 0
        self.last_action: str = ''
        self.revealed_on_fold: List[int] = []
        # actor(game_state) -> decision dict, e.g. {'action': 'call', 'amount': 0}
        # actor may be sync or async; typing is broad to accept both.
        self.actor: Optional[Callable[[dict], Any]] = None

    def __repr__(self) -> str:
        return f"Player({self.name!r}, chips={self.chips}, seat={self.seat})"

    def reset_for_hand(self) -> None:
        """Clear every per-hand field; players without chips sit the hand out."""
        self.all_in = False
        self.contributed_this_round = 0
        self.contributed_total = 0
        self.last_action = ''
        self.revealed_on_fold = []
        if self.chips > 0:
            self.folded = False
            self.hand = Hand()
        else:
            self.folded = True
            self.hand = None

    def reset_for_round(self) -> None:
        self.contributed_this_round = 0
        self.last_action = ''

    def can_act(self) -> bool:
        return not self.folded and not self.all_in and self.chips > 0

    @property
    def in_hand(self) -> bool:
        """Still holding a live hand (not folded)."""
        return not self.folded and self.hand is not None

    def commit(self, amount: int) -> int:
        """Move chips from the stack into this hand's contributions."""
        if amount < 0:
            raise ValueError("Cannot commit a negative amount")
        if amount > self.chips:
            raise ValueError(f"{self.name} cannot commit {amount} with {self.chips} chips")
        self.chips -= amount
        self.contributed_this_round += amount
        self.contributed_total += amount
        if self.chips == 0:
            self.all_in = True
        return amount

    async def take_action(self, game_state: dict, timeout: Optional[float] = None) -> dict:
        """Ask the actor for a decision, giving up after `timeout` seconds.

        A missed deadline raises asyncio.TimeoutError, which callers treat as
        a distinct outcome from any decision.
        """
        if self.actor is None:
            raise NotImplementedError("No action actor set for player")
        if timeout is not None and timeout <= 0:
            raise asyncio.TimeoutError()

        async def _decide():
            # Support both sync and async actor callables
            result = self.actor(game_state)
            if asyncio.iscoroutine(result):
                return await result
            return result

        return await asyncio.wait_for(_decide(), timeout)


class PlayerManager:
    """Seats players at a table in the order they register."""

    def __init__(self, max_players: int = 6):
        self.players: List[Player] = []
        self.max_players = max_players

    def register_player(self, name: str, chips: int = 200) -> Player:
        name = name.strip()
        if not name or len(name) > MAX_NAME_LENGTH:
            raise ValueError(f"Player names must be 1 to {MAX_NAME_LENGTH} characters")
        if any(p.name.casefold() == name.casefold() for p in self.players):
            raise ValueError(f"Name {name!r} is already taken")
        if len(self.players) >= self.max_players:
            raise RuntimeError("Table is full")

        player = Player(name, chips=chips, seat=len(self.players))
        self.players.append(player)
        logging.debug(f"Player {name} seated at {player.seat} with ${chips}")
        return player
