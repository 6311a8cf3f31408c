"""
Core table state for draw poker: seating order, deck, dealing and the
event stream that the presentation layer listens to.
"""

import logging
import random
from typing import Any, Callable, Dict, List, Optional

from drawpoker.deck import Deck
from drawpoker.hand import HAND_SIZE
from drawpoker.player import Player
from drawpoker.settings import GameSettings

Event = Dict[str, Any]
Listener = Callable[[Event], None]


class GameEngine:
    """Table state shared by the betting, draw and showdown engines."""

    def __init__(self, players: List[Player], settings: Optional[GameSettings] = None,
                 rng: Optional[random.Random] = None):
        self.players = players
        self.settings = settings or GameSettings(num_players=len(players))
        self.rng = rng
        self.deck: Optional[Deck] = None
        self.dealer = 0
        self.hand_number = 0
        self.action_history: List[str] = []
        self.last_fold_was_timeout = False
        self._listeners: List[Listener] = []

    # Events ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def notify(self, event: Event) -> None:
        """Deliver an event to every listener; listener failures never reach the engine."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logging.exception("Event listener failed on %s", event.get('ev'))

    def record(self, player: Player, text: str, **fields: Any) -> None:
        """Record a public player action in the history and the event stream."""
        player.last_action = text
        self.action_history.append(f"{player.name} {text}")
        event = {'ev': 'ACTION', 'player': player.name, 'seat': player.seat,
                 'text': text, 'stack': player.chips}
        event.update(fields)
        self.notify(event)

    def record_private(self, player: Player, text: str) -> None:
        self.notify({'ev': 'PRIVATE', 'player': player.name, 'seat': player.seat,
                     'text': text, 'private': True})

    # Seating ---------------------------------------------------------

    def next_seat(self, i: int) -> int:
        return (i + 1) % len(self.players)

    def seat_order_from(self, start: int) -> List[Player]:
        """Players with chips, clockwise from `start` inclusive."""
        n = len(self.players)
        order = [self.players[(start + i) % n] for i in range(n)]
        return [p for p in order if p.chips > 0]

    def action_order(self) -> List[Player]:
        """Players with chips, starting left of the dealer."""
        return self.seat_order_from(self.next_seat(self.dealer))

    def rotate_dealer(self) -> None:
        """Move the button to the next seat clockwise that still has chips."""
        n = len(self.players)
        for step in range(1, n + 1):
            idx = (self.dealer + step) % n
            if self.players[idx].chips > 0:
                self.dealer = idx
                return

    def find_table_winner(self) -> Optional[Player]:
        alive = [p for p in self.players if p.chips > 0]
        return alive[0] if len(alive) == 1 else None

    def live_players(self) -> List[Player]:
        return [p for p in self.players if p.in_hand]

    def total_pot(self) -> int:
        return sum(p.contributed_total for p in self.players)

    def total_chips(self) -> int:
        """Stacks plus contributions; constant for the lifetime of a table."""
        return sum(p.chips + p.contributed_total for p in self.players)

    # Hand lifecycle --------------------------------------------------

    def reset_hand(self) -> None:
        """Reset the per-hand state and shuffle a fresh deck."""
        self.deck = Deck(rng=self.rng)
        self.hand_number += 1
        self.action_history = []
        self.last_fold_was_timeout = False
        for p in self.players:
            p.reset_for_hand()

    def reset_round_bets(self) -> None:
        for p in self.players:
            p.reset_for_round()

    def deal_hands(self) -> None:
        """Deal five cards one at a time clockwise, starting left of the dealer."""
        if self.deck is None:
            raise RuntimeError("reset_hand() must run before dealing")
        order = [p for p in self.action_order() if p.hand is not None]
        dealer = self.players[self.dealer]
        names = " then ".join(p.name for p in order)
        text = f"shuffles and deals one card at a time clockwise around the table to {names} x{HAND_SIZE}"
        self.action_history.append(f"{dealer.name} {text}")
        self.notify({'ev': 'DEAL', 'player': dealer.name, 'seat': dealer.seat, 'text': text,
                     'stack': dealer.chips, 'order': [p.name for p in order]})
        for _ in range(HAND_SIZE):
            for p in order:
                p.hand.add(self.deck.deal())
        for p in order:
            self.record_private(p, f"initial hand [{p.hand.fmt_inline()}]")

    def clear_hands(self) -> None:
        for p in self.players:
            p.hand = None

    def handle_player_quit(self, player: Player) -> None:
        """Remove a player from play, sharing their stack among the others."""
        chips = player.chips
        # all-in players hold no chips but are still at the table
        recipients = [p for p in self.players if p is not player and (p.chips > 0 or p.in_hand)]
        if not recipients:
            raise RuntimeError(f"{player.name} is the only player left at the table")
        share, rem = divmod(chips, len(recipients))
        for i, p in enumerate(recipients):
            p.chips += share + (1 if i < rem else 0)
        player.chips = 0
        player.folded = True
        self.last_fold_was_timeout = False
        self.record(player, "quit", kind='quit', amount=chips)
        logging.info(f"{player.name} left the table, ${chips} shared among {len(recipients)} players")

    def get_public_state(self, current_player_name: Optional[str] = None) -> Dict[str, Any]:
        """Get the current public game state."""
        folded = []
        for p in self.players:
            if p.folded and p.hand is not None:
                shown = p.hand.cards_at(p.revealed_on_fold)
                folded.append((p.name, shown))
        return {
            'hand_number': self.hand_number,
            'dealer': self.players[self.dealer].name,
            'pot': self.total_pot(),
            'current_bet': max((p.contributed_this_round for p in self.players), default=0),
            'players': [(p.name, p.chips, p.contributed_this_round, self._status(p)) for p in self.players],
            'still_in': [p.name for p in self.live_players()],
            'folded': folded,
            'action_history': list(self.action_history),
            'current_player': current_player_name,
        }

    @staticmethod
    def _status(player: Player) -> str:
        if player.hand is None:
            return 'out'
        if player.folded:
            return 'folded'
        if player.all_in:
            return 'all-in'
        return 'active'
