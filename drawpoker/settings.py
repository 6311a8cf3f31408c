"""
Table settings for a draw poker game.
"""

from dataclasses import dataclass

from drawpoker.hand import HAND_SIZE


MIN_PLAYERS = 2
MAX_PLAYERS = 6
DECK_SIZE = 52


@dataclass(frozen=True)
class GameSettings:
    num_players: int = 2
    starting_chips: int = 200
    min_bet: int = 10
    turn_timeout_secs: int = 30  # 0 disables the turn clock
    max_discards: int = 3  # common variant

    def validate(self) -> 'GameSettings':
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
        if self.starting_chips <= 0 or self.starting_chips % 10:
            raise ValueError("starting_chips must be a positive multiple of 10")
        if self.min_bet <= 0:
            raise ValueError("min_bet must be positive")
        if self.turn_timeout_secs < 0:
            raise ValueError("turn_timeout_secs cannot be negative")
        if not 0 <= self.max_discards <= 5:
            raise ValueError("max_discards must be between 0 and 5")
        if self.num_players * (HAND_SIZE + self.max_discards) > DECK_SIZE:
            raise ValueError(f"max_discards={self.max_discards} could run a {self.num_players}-player table out of cards")
        return self

    @property
    def turn_timeout(self):
        """Turn clock in seconds for asyncio, or None when disabled."""
        return self.turn_timeout_secs or None
