"""
Hand evaluation for five-card draw.

`evaluate` maps exactly five cards to an `Evaluated` value.  Evaluated
values are plain tuples, so the usual comparison operators give the
poker ordering: category first, then the tiebreak key lexicographically.
"""

from collections import Counter
from typing import Iterable, List, NamedTuple, Tuple

from drawpoker.deck import Card


# Hand ranking constants
HAND_RANKS = {
    'highcard': 0,
    'pair': 1,
    'two_pair': 2,
    'trips': 3,
    'straight': 4,
    'flush': 5,
    'fullhouse': 6,
    'quads': 7,
    'straight_flush': 8,
}

WHEEL = (2, 3, 4, 5, 14)


class Evaluated(NamedTuple):
    category: int
    keys: Tuple[int, int, int, int, int]


def _straight_high(ranks: List[int]) -> int:
    """Return the straight's high card, or 0 when the ranks are not a straight."""
    rset = sorted(set(ranks))
    if len(rset) != 5:
        return 0
    # A-2-3-4-5: the ace plays low in this one pattern only
    if tuple(rset) == WHEEL:
        return 5
    if rset[-1] - rset[0] == 4:
        return rset[-1]
    return 0


def _keys_by_count(ranks: List[int]) -> Tuple[int, int, int, int, int]:
    # groups ordered by (count desc, rank desc): the pair ahead of its kickers,
    # the higher pair ahead of the lower one
    groups = sorted(Counter(ranks).items(), key=lambda item: (item[1], item[0]), reverse=True)
    keys = [rank for rank, cnt in groups for _ in range(cnt)]
    keys += [0] * (5 - len(keys))
    return tuple(keys[:5])  # type: ignore[return-value]


def evaluate(cards: Iterable[Card]) -> Evaluated:
    """Evaluate exactly 5 cards.

    Raises ValueError when called with any other number of cards; that is a
    caller bug, not a recoverable condition.
    """
    cards = list(cards)
    if len(cards) != 5:
        raise ValueError(f"evaluate() needs exactly 5 cards, got {len(cards)}")

    ranks = sorted((r for r, _ in cards), reverse=True)
    suits = Counter(s for _, s in cards)

    counts = sorted(Counter(ranks).values(), reverse=True)
    is_flush = 5 in suits.values()
    straight_high = _straight_high(ranks)

    if is_flush and straight_high:
        return Evaluated(HAND_RANKS['straight_flush'], (straight_high, 0, 0, 0, 0))
    if counts[0] == 4:
        return Evaluated(HAND_RANKS['quads'], _keys_by_count(ranks))
    if counts[0] == 3 and counts[1] == 2:
        return Evaluated(HAND_RANKS['fullhouse'], _keys_by_count(ranks))
    if is_flush:
        return Evaluated(HAND_RANKS['flush'], tuple(ranks))  # type: ignore[arg-type]
    if straight_high:
        return Evaluated(HAND_RANKS['straight'], (straight_high, 0, 0, 0, 0))
    if counts[0] == 3:
        return Evaluated(HAND_RANKS['trips'], _keys_by_count(ranks))
    if counts[0] == 2 and counts[1] == 2:
        return Evaluated(HAND_RANKS['two_pair'], _keys_by_count(ranks))
    if counts[0] == 2:
        return Evaluated(HAND_RANKS['pair'], _keys_by_count(ranks))
    return Evaluated(HAND_RANKS['highcard'], tuple(ranks))  # type: ignore[arg-type]


def compare(a: Iterable[Card], b: Iterable[Card]) -> int:
    """Return -1, 0 or 1 as hand `a` is worse than, equal to or better than `b`."""
    ea, eb = evaluate(a), evaluate(b)
    return (ea > eb) - (ea < eb)


def hand_description(hand_rank: int, tiebreakers: Tuple[int, ...]) -> str:
    """Convert hand evaluation result to human-readable description."""

    def rank_name(r: int) -> str:
        names = {11: 'Jack', 12: 'Queen', 13: 'King', 14: 'Ace'}
        return names.get(r, str(r))

    def rank_name_plural(r: int) -> str:
        names = {6: 'Sixes', 11: 'Jacks', 12: 'Queens', 13: 'Kings', 14: 'Aces'}
        return names.get(r, f"{r}s")

    if hand_rank == HAND_RANKS['straight_flush']:
        if tiebreakers[0] == 14:  # Ace high straight flush
            return "Royal Flush"
        return f"Straight Flush, {rank_name(tiebreakers[0])} high"

    elif hand_rank == HAND_RANKS['quads']:
        return f"Four of a Kind, {rank_name_plural(tiebreakers[0])}"

    elif hand_rank == HAND_RANKS['fullhouse']:
        return f"Full House, {rank_name_plural(tiebreakers[0])} over {rank_name_plural(tiebreakers[3])}"

    elif hand_rank == HAND_RANKS['flush']:
        return f"Flush, {rank_name(tiebreakers[0])} high"

    elif hand_rank == HAND_RANKS['straight']:
        high_card = tiebreakers[0]
        if high_card == 5:  # Wheel (A-2-3-4-5)
            return "Straight, 5 high (Wheel)"
        return f"Straight, {rank_name(high_card)} high"

    elif hand_rank == HAND_RANKS['trips']:
        return f"Three of a Kind, {rank_name_plural(tiebreakers[0])}"

    elif hand_rank == HAND_RANKS['two_pair']:
        return f"Two Pair, {rank_name_plural(tiebreakers[0])} and {rank_name_plural(tiebreakers[2])}"

    elif hand_rank == HAND_RANKS['pair']:
        return f"Pair of {rank_name_plural(tiebreakers[0])}"

    else:  # high card
        return f"High Card, {rank_name(tiebreakers[0])}"


def describe(cards: Iterable[Card]) -> str:
    return hand_description(*evaluate(cards))
