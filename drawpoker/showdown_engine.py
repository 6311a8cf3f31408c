"""
Showdown and pot settlement for draw poker.

Contributions are kept per player until settlement; the pot is only ever
their sum.  At showdown they are cut into level slices so a player who
went all-in for less can only win what they contested.
"""

import logging
from typing import Any, Dict, List, Tuple

from drawpoker.hand_evaluation import describe, evaluate
from drawpoker.player import Player

SidePot = Tuple[int, List[Player]]


def build_side_pots(players: List[Player]) -> List[SidePot]:
    """Cut the hand's contributions into (amount, eligible players) slices.

    Slices come out in ascending contribution level.  Folded players' chips
    stay in the slices they reach but never make them eligible; anything
    above the highest live level forms a final slice open to every live hand.
    """
    live = [p for p in players if p.in_hand]
    levels = sorted({p.contributed_total for p in live if p.contributed_total > 0})
    total = sum(p.contributed_total for p in players)

    pots: List[SidePot] = []
    assigned = 0
    for level in levels:
        cumulative = sum(min(p.contributed_total, level) for p in players)
        eligible = [p for p in live if p.contributed_total >= level]
        pots.append((cumulative - assigned, eligible))
        assigned = cumulative

    if assigned < total:
        pots.append((total - assigned, live))
    return pots


class ShowdownEngine:
    """Handles showdown evaluation and pot distribution."""

    def __init__(self, game_engine):
        self.game_engine = game_engine

    def split_order(self, winners: List[Player]) -> List[Player]:
        """Tied winners in seat order from the seat left of the dealer."""
        engine = self.game_engine
        n = len(engine.players)
        first = engine.next_seat(engine.dealer)
        return sorted(winners, key=lambda p: (p.seat - first) % n)

    def award_uncontested(self) -> Dict[str, Any]:
        """Give the whole pot to the only live hand, without comparing cards."""
        engine = self.game_engine
        live = engine.live_players()
        if len(live) != 1:
            raise RuntimeError(f"award_uncontested() needs exactly one live hand, found {len(live)}")
        winner = live[0]
        pot = engine.total_pot()
        winner.chips += pot
        self._collect()
        engine.record(winner, f"wins {pot} chips as all others folded", kind='win', amount=pot)
        self._log_final_hands()
        engine.notify({'ev': 'POT_AWARD', 'amount': pot, 'winners': [winner.name],
                       'shares': {winner.name: pot}, 'hand': None})
        logging.info(f"{winner.name} wins ${pot} uncontested")
        return {'amount': pot, 'winners': [winner.name], 'shares': {winner.name: pot}, 'hand': None}

    def settle(self) -> List[Dict[str, Any]]:
        """Evaluate live hands and pay out every slice of the pot.

        Returns one entry per paid slice: amount, winner names, each winner's
        share and the winning hand's description.
        """
        engine = self.game_engine
        live = engine.live_players()
        if len(live) < 2:
            raise RuntimeError("settle() needs at least two live hands; use award_uncontested()")

        results = {p.name: evaluate(p.hand.cards) for p in live}
        engine.notify({
            'ev': 'SHOWDOWN',
            'hands': [(p.name, list(p.hand.cards), describe(p.hand.cards)) for p in live],
        })

        awards = []
        for amount, eligible in build_side_pots(engine.players):
            if amount <= 0 or not eligible:
                continue
            best = max(results[p.name] for p in eligible)
            winners = self.split_order([p for p in eligible if results[p.name] == best])
            shares = self._split(amount, winners)
            description = describe(winners[0].hand.cards)
            for p in winners:
                engine.record(p, f"wins {shares[p.name]} with [{p.hand.fmt_inline()}]",
                              kind='win', amount=shares[p.name])
            award = {'amount': amount, 'winners': [p.name for p in winners],
                     'shares': shares, 'hand': description}
            engine.notify(dict(award, ev='POT_AWARD'))
            awards.append(award)
            logging.debug(f"Pot of ${amount} to {award['winners']} with {description}")

        self._collect()
        self._log_final_hands()
        return awards

    def _split(self, amount: int, winners: List[Player]) -> Dict[str, int]:
        share, rem = divmod(amount, len(winners))
        shares = {}
        for i, p in enumerate(winners):
            won = share + (1 if i < rem else 0)
            p.chips += won
            shares[p.name] = won
        return shares

    def _collect(self) -> None:
        # contributions are now paid out; the pot is empty
        for p in self.game_engine.players:
            p.contributed_total = 0
            p.contributed_this_round = 0

    def _log_final_hands(self) -> None:
        engine = self.game_engine
        for p in engine.players:
            if p.hand is None:
                continue
            note = "final hand (folded)" if p.folded else "final hand"
            engine.record_private(p, f"{note} [{p.hand.fmt_inline()}]")
