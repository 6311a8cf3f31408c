"""
Five-Card Draw game coordinator.

This module brings together the game engine, the betting, draw and
showdown engines, and plays hands from shuffle to settlement.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Dict, List, Optional

from drawpoker.betting_engine import BettingEngine
from drawpoker.draw_engine import DrawEngine
from drawpoker.game_engine import GameEngine, Listener
from drawpoker.player import Player
from drawpoker.settings import GameSettings
from drawpoker.showdown_engine import ShowdownEngine


class GameExit(Exception):
    """Raised by a front end when a player asks to leave the program."""


class Game:
    """Main game coordinator that orchestrates all game components."""

    def __init__(self, players: List[Player], settings: Optional[GameSettings] = None,
                 rng: Optional[random.Random] = None):
        self.players = players
        self.settings = settings or GameSettings(num_players=len(players))

        # Initialize game components
        self.engine = GameEngine(players, self.settings, rng)
        self.betting = BettingEngine(self.engine)
        self.draw = DrawEngine(self.engine)
        self.showdown = ShowdownEngine(self.engine)

    @property
    def action_history(self):
        return self.engine.action_history

    def subscribe(self, listener: Listener) -> None:
        self.engine.subscribe(listener)

    def _contested(self) -> bool:
        return len(self.engine.live_players()) > 1

    async def play_hand(self) -> Dict[str, Any]:
        """Play a single hand from shuffle to settlement.

        Driven entirely by Player.take_action.  Returns a summary with the
        pot awards and the stacks after the hand.
        """
        engine = self.engine
        seated = [p for p in self.players if p.chips > 0]
        if len(seated) < 2:
            raise RuntimeError("A hand needs at least two players with chips")
        chips_before = sum(p.chips for p in self.players)

        engine.reset_hand()
        dealer = self.players[engine.dealer]
        engine.notify({'ev': 'HAND_START', 'hand_number': engine.hand_number,
                       'dealer': dealer.name, 'stacks': {p.name: p.chips for p in self.players}})
        logging.info(f"Hand {engine.hand_number}: {dealer.name} deals to {len(seated)} players")
        engine.deal_hands()

        await self.betting.betting_round("First betting round")
        if self._contested():
            await self.draw.draw_phase()
        if self._contested():
            await self.betting.betting_round("Second betting round")

        if self._contested():
            awards = self.showdown.settle()
            uncontested = False
        else:
            awards = [self.showdown.award_uncontested()]
            uncontested = True
            if not engine.last_fold_was_timeout:
                await self.offer_reveal(engine.live_players()[0])

        chips_after = sum(p.chips for p in self.players)
        if chips_after != chips_before:
            raise RuntimeError(f"Chip count changed during hand {engine.hand_number}: "
                               f"{chips_before} before, {chips_after} after")

        summary = {
            'hand_number': engine.hand_number,
            'uncontested': uncontested,
            'awards': awards,
            'stacks': {p.name: p.chips for p in self.players},
        }
        engine.notify(dict(summary, ev='HAND_END'))
        engine.clear_hands()
        engine.rotate_dealer()
        return summary

    async def offer_reveal(self, winner: Player) -> bool:
        """Ask an uncontested winner whether to show their cards."""
        if winner.actor is None or winner.hand is None:
            return False
        engine = self.engine
        state = engine.get_public_state(current_player_name=winner.name)
        state.update({'phase': 'reveal', 'hand': list(winner.hand.cards),
                      'timeout': self.settings.turn_timeout, 'error': None})
        try:
            decision = await winner.take_action(state, self.settings.turn_timeout)
        except asyncio.TimeoutError:
            return False
        if not isinstance(decision, dict) or not decision.get('show'):
            return False
        engine.record(winner, f"reveals [{winner.hand.fmt_inline()}]", kind='reveal', amount=0,
                      cards=list(winner.hand.cards))
        return True

    async def play_until_winner(self) -> Player:
        """Play hands until one player holds every chip."""
        while True:
            winner = self.engine.find_table_winner()
            if winner is not None:
                logging.info(f"{winner.name} wins the table with ${winner.chips}")
                return winner
            await self.play_hand()
