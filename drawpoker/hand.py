"""
A player's five-card draw hand.
"""

from typing import Iterable, Iterator, List

from drawpoker.deck import Card, Deck, card_str

HAND_SIZE = 5


class Hand:
    """Ordered cards held by one player during a hand."""

    def __init__(self, cards: Iterable[Card] = ()):
        self.cards: List[Card] = list(cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __repr__(self) -> str:
        return f"Hand([{self.fmt_inline()}])"

    def add(self, card: Card) -> None:
        if len(self.cards) >= HAND_SIZE:
            raise ValueError("Hand already holds five cards")
        self.cards.append(card)

    def discard_indices(self, indices: Iterable[int]) -> List[Card]:
        """Remove the cards at the given positions and return them."""
        idxs = sorted(set(indices))
        for i in idxs:
            if i < 0 or i >= len(self.cards):
                raise ValueError(f"No card at position {i}")
        # remove from highest index to lowest to keep indices valid
        return [self.cards.pop(i) for i in reversed(idxs)]

    def refill(self, deck: Deck) -> None:
        while len(self.cards) < HAND_SIZE:
            self.cards.append(deck.deal())

    def cards_at(self, indices: Iterable[int]) -> List[Card]:
        return [self.cards[i] for i in indices if 0 <= i < len(self.cards)]

    def fmt_inline(self) -> str:
        return " ".join(card_str(c) for c in self.cards)
