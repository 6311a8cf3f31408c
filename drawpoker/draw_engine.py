"""
The draw: every live seat may swap some of its cards once.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from drawpoker.betting_engine import InvalidAction
from drawpoker.hand import HAND_SIZE
from drawpoker.player import Player


def parse_discards(decision: Dict[str, Any], max_discards: int) -> List[int]:
    """Validate the 0-based discard positions of a draw decision.

    Duplicates are dropped, and anything past `max_discards` positions is
    ignored.  Raises InvalidAction for an empty list or a position off the hand.
    """
    raw = decision.get('indices') or []
    try:
        indices = [int(i) for i in raw]
    except (TypeError, ValueError):
        raise InvalidAction("Card numbers must be whole numbers")
    if not indices:
        raise InvalidAction("Choose at least one card to discard, or stand pat")
    bad = [i for i in indices if not 0 <= i < HAND_SIZE]
    if bad:
        raise InvalidAction(f"No card at position {bad[0] + 1}; choose from 1-{HAND_SIZE}")
    unique = list(dict.fromkeys(indices))
    return unique[:max_discards]


class DrawEngine:
    """Runs the draw phase between the two betting rounds."""

    def __init__(self, game_engine):
        self.game_engine = game_engine

    def draw_order(self) -> List[Player]:
        """Seats left of the dealer onwards that still have decisions to make."""
        return [p for p in self.game_engine.action_order() if p.in_hand and not p.all_in]

    async def draw_phase(self) -> None:
        engine = self.game_engine
        engine.notify({'ev': 'ROUND_START', 'title': 'Draw',
                       'max_discards': engine.settings.max_discards})
        for player in self.draw_order():
            # an earlier quit can end the hand
            if len(engine.live_players()) < 2:
                break
            await self._take_turn(player)

    def decision_state(self, player: Player, remaining: Optional[float], error: Optional[str]) -> Dict[str, Any]:
        state = self.game_engine.get_public_state(current_player_name=player.name)
        state.update({
            'phase': 'draw',
            'max_discards': self.game_engine.settings.max_discards,
            'hand': list(player.hand.cards),
            'timeout': remaining,
            'error': error,
        })
        return state

    def apply(self, player: Player, decision: Dict[str, Any]) -> None:
        """Apply a stand or discard decision for `player`."""
        engine = self.game_engine
        if not player.in_hand:
            raise RuntimeError(f"{player.name} has no live hand to draw to")
        if not isinstance(decision, dict):
            raise InvalidAction("Malformed decision")
        action = decision.get('action')
        if action == 'stand':
            engine.record(player, "stands pat", kind='stand', amount=0)
            return
        if action != 'discard':
            raise InvalidAction(f"Unknown draw action {action!r}")

        indices = parse_discards(decision, engine.settings.max_discards)
        if not indices:
            engine.record(player, "stands pat", kind='stand', amount=0)
            return
        player.hand.discard_indices(indices)
        player.hand.refill(engine.deck)
        n = len(indices)
        engine.record(player, f"draws {n} new card{'s' if n != 1 else ''}", kind='draw', amount=n)
        engine.record_private(player, f"after draw [{player.hand.fmt_inline()}]")

    async def _take_turn(self, player: Player) -> None:
        engine = self.game_engine
        loop = asyncio.get_running_loop()
        timeout = engine.settings.turn_timeout
        deadline = loop.time() + timeout if timeout else None
        error = None

        while True:
            remaining = None if deadline is None else deadline - loop.time()
            state = self.decision_state(player, remaining, error)
            try:
                decision = await player.take_action(state, remaining)
            except asyncio.TimeoutError:
                logging.info(f"{player.name} ran out of time in the draw; standing pat")
                engine.record(player, "stands pat (timeout)", kind='stand', amount=0, timeout=True)
                return

            logging.debug("Player %s draw decision: %s", player.name, decision)
            try:
                if isinstance(decision, dict) and decision.get('action') == 'quit':
                    engine.handle_player_quit(player)
                    return
                self.apply(player, decision)
            except InvalidAction as exc:
                logging.info("Rejected draw from %s (%s): %s", player.name, decision, exc)
                error = str(exc)
                continue
            return
