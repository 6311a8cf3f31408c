"""
Deck and card operations for draw poker.
"""

import random
from typing import List, Optional, Tuple

# Card representation: tuple (rank:int 2..14, suit:str one of 'cdhs')
Rank = int
Suit = str
Card = Tuple[Rank, Suit]

RANKS = list(range(2, 15))  # 2-14 (where 11=J, 12=Q, 13=K, 14=A)
SUITS = list('cdhs')  # clubs, diamonds, hearts, spades

RANK_NAMES = {10: 'T', 11: 'J', 12: 'Q', 13: 'K', 14: 'A'}
SUIT_SYMBOLS = {'c': '♣', 'd': '♦', 'h': '♥', 's': '♠'}


def make_deck() -> List[Card]:
    """Create a standard 52-card deck."""
    return [(r, s) for s in SUITS for r in RANKS]


def card_str(card: Card) -> str:
    """Convert a card to its string representation, e.g. 'T♠'."""
    r, s = card
    return f"{RANK_NAMES.get(r, r)}{SUIT_SYMBOLS.get(s, s)}"


def parse_card(label: str) -> Card:
    """Parse a short label such as 'Ah', 'Td' or '10c' into a card."""
    label = label.strip()
    if len(label) < 2:
        raise ValueError(f"Invalid card label: {label!r}")
    rank_part, suit = label[:-1].upper(), label[-1].lower()
    if suit not in SUITS:
        raise ValueError(f"Invalid suit: {label!r}")
    lookup = {name: value for value, name in RANK_NAMES.items()}
    if rank_part in lookup:
        return (lookup[rank_part], suit)
    if rank_part.isdigit() and 2 <= int(rank_part) <= 10:
        return (int(rank_part), suit)
    raise ValueError(f"Invalid rank: {label!r}")


def parse_cards(labels: str) -> List[Card]:
    """Parse a space separated list of card labels."""
    return [parse_card(label) for label in labels.split()]


class Deck:
    """A shuffled 52-card deck owned by a single hand.

    Cards are dealt from the end of the list and the deck is never refilled.
    """

    def __init__(self, cards: Optional[List[Card]] = None, rng: Optional[random.Random] = None):
        if cards is None:
            cards = make_deck()
            (rng or random).shuffle(cards)
        if len(set(cards)) != len(cards):
            raise ValueError("Deck contains duplicate cards")
        self._cards: List[Card] = list(cards)

    def __len__(self) -> int:
        return len(self._cards)

    def deal(self) -> Card:
        """Remove and return the last card."""
        if not self._cards:
            raise ValueError("Cannot deal from an empty deck")
        return self._cards.pop()

    def deal_many(self, num_cards: int) -> List[Card]:
        if len(self._cards) < num_cards:
            raise ValueError(f"Cannot deal {num_cards} cards from deck of {len(self._cards)}")
        return [self.deal() for _ in range(num_cards)]
