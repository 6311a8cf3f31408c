"""
Betting logic for draw poker.

`BettingRound` is the state of a single street and the step function
that applies one decision to it.  `BettingEngine` drives a round to
completion by asking each seat on turn for a decision.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from drawpoker.hand import HAND_SIZE
from drawpoker.player import Player


class InvalidAction(ValueError):
    """A decision that cannot be applied; the same seat is asked again."""


def _amount(decision: Dict[str, Any]) -> int:
    raw = decision.get('amount', 0) or 0
    if isinstance(raw, float) and not raw.is_integer():
        raise InvalidAction(f"Amount must be a whole number, got {raw!r}")
    try:
        amount = int(raw)
    except (TypeError, ValueError):
        raise InvalidAction(f"Amount must be a whole number, got {raw!r}")
    if amount < 0:
        raise InvalidAction("Amount cannot be negative")
    return amount


@dataclass
class BettingRound:
    """State carried through one betting street."""

    players: List[Player]  # everyone at the table
    order: List[Player]  # seats with chips, starting left of the dealer
    min_bet: int
    current_bet: int = 0
    last_raiser: Optional[Player] = None
    acted: Dict[int, bool] = field(default_factory=dict)  # acted since the last full raise
    idx: int = 0
    moved: int = 0

    def __post_init__(self):
        for p in self.order:
            self.acted.setdefault(p.seat, False)

    def live_count(self) -> int:
        return sum(1 for p in self.players if p.in_hand)

    def is_complete(self) -> bool:
        if self.live_count() < 2 or not self.order:
            return True
        if not any(p.can_act() for p in self.order):
            return True
        can_continue = any(
            not p.folded and not p.all_in
            and (p.contributed_this_round < self.current_bet
                 or (self.current_bet == 0 and not self.acted[p.seat]))
            for p in self.order
        )
        need_more = self.last_raiser is not None and not self.acted[self.last_raiser.seat]
        return not can_continue and not need_more

    def next_to_act(self) -> Optional[Player]:
        """Skip seats that cannot act and return the one on turn, or None when done."""
        while not self.is_complete():
            p = self.order[self.idx]
            if p.can_act():
                return p
            self._finish_turn(p)
        return None

    def _finish_turn(self, player: Player) -> None:
        self.acted[player.seat] = True
        self.idx = (self.idx + 1) % len(self.order)

    def to_call(self, player: Player) -> int:
        return max(self.current_bet - player.contributed_this_round, 0)

    def others_can_call_more(self, player: Player) -> bool:
        """Whether any opponent could put in more than the current bet."""
        return any(
            p is not player and not p.folded and not p.all_in and p.chips > 0
            and p.chips + p.contributed_this_round > self.current_bet
            for p in self.order
        )

    def legal_actions(self, player: Player) -> Dict[str, Any]:
        """The action menu for `player`, computed from the round state."""
        call_diff = self.to_call(player)
        chips_after_call = max(player.chips - call_diff, 0)
        can_raise = chips_after_call >= self.min_bet and self.others_can_call_more(player)

        actions = []
        if call_diff == 0:
            actions.append('check')
            if can_raise:
                actions.append('bet')
        else:
            actions.append('call')
            if can_raise:
                actions.append('raise')
        actions.append('fold')
        if call_diff == 0 or call_diff < player.chips:
            actions.append('allin')
        actions.append('quit')
        return {
            'actions': actions,
            'to_call': min(call_diff, player.chips),
            'call_is_all_in': call_diff >= player.chips,
            'current_bet': self.current_bet,
            'min_bet': self.min_bet,
            'chips': player.chips,
        }

    def apply(self, player: Player, decision: Dict[str, Any]) -> Dict[str, Any]:
        """Apply one decision for the seat on turn.

        Returns a description of what happened ({'kind', 'amount', 'text'}).
        Raises InvalidAction, leaving the state untouched, when the decision
        cannot be honoured.
        """
        if player.folded or player.all_in:
            raise RuntimeError(f"{player.name} cannot act: folded or all-in")
        if not self.order or self.order[self.idx] is not player:
            raise RuntimeError(f"{player.name} acted out of turn")
        if not isinstance(decision, dict):
            raise InvalidAction("Malformed decision")

        action = decision.get('action')
        call_diff = self.to_call(player)
        if action == 'bet' and call_diff > 0:
            action = 'raise'
        elif action == 'raise' and call_diff == 0:
            action = 'bet'

        if action == 'fold':
            result = self._fold(player, decision)
        elif action == 'check':
            if call_diff > 0:
                raise InvalidAction(f"Cannot check when facing a bet of {call_diff}")
            result = {'kind': 'check', 'amount': 0, 'text': 'checked'}
        elif action == 'call':
            result = self._call(player) if call_diff else {'kind': 'check', 'amount': 0, 'text': 'checked'}
        elif action == 'bet':
            result = self._bet(player, _amount(decision))
        elif action == 'raise':
            result = self._raise(player, _amount(decision))
        elif action == 'allin':
            result = self._all_in(player)
        else:
            raise InvalidAction(f"Unknown action {action!r}")

        self._finish_turn(player)
        return result

    def fold_on_timeout(self, player: Player) -> Dict[str, Any]:
        result = self._fold(player, {}, timed_out=True)
        self._finish_turn(player)
        return result

    def skip_quitter(self, player: Player) -> None:
        self._finish_turn(player)

    # Step helpers ----------------------------------------------------

    def _commit(self, player: Player, amount: int) -> int:
        player.commit(amount)
        self.moved += amount
        prev_bet = self.current_bet
        if player.contributed_this_round > self.current_bet:
            self.current_bet = player.contributed_this_round
        # only a full raise reopens the action
        if player.contributed_this_round - prev_bet >= self.min_bet:
            self.last_raiser = player
            for seat in self.acted:
                self.acted[seat] = False
        return amount

    def _fold(self, player: Player, decision: Dict[str, Any], timed_out: bool = False) -> Dict[str, Any]:
        if timed_out:
            player.folded = True
            return {'kind': 'fold', 'amount': 0, 'text': 'folded (timeout)', 'timeout': True}
        try:
            indices = {int(i) for i in decision.get('reveal') or ()}
        except (TypeError, ValueError):
            raise InvalidAction("Reveal positions must be card numbers")
        reveal = sorted(i for i in indices if 0 <= i < HAND_SIZE)
        player.folded = True
        player.revealed_on_fold = reveal
        result = {'kind': 'fold', 'amount': 0, 'text': 'folded', 'timeout': False}
        if reveal and player.hand is not None:
            result['shows'] = player.hand.cards_at(reveal)
        return result

    def _call(self, player: Player) -> Dict[str, Any]:
        need = min(self.to_call(player), player.chips)
        self._commit(player, need)
        if player.all_in:
            return {'kind': 'allin', 'amount': need, 'text': f'all-in {need}'}
        return {'kind': 'call', 'amount': need, 'text': f'called {need}'}

    def _bet(self, player: Player, amount: int) -> Dict[str, Any]:
        if amount > player.chips:
            raise InvalidAction(f"Invalid bet. Must be between {self.min_bet} and your chips ({player.chips}).")
        if amount < self.min_bet and amount != player.chips:
            raise InvalidAction(f"Invalid bet. Must be at least {self.min_bet} or all-in.")
        if not self.others_can_call_more(player):
            raise InvalidAction("Nobody left to call a bet. Check or go all-in.")
        self._commit(player, amount)
        if player.all_in:
            return {'kind': 'allin', 'amount': amount, 'text': f'all-in {amount}'}
        return {'kind': 'bet', 'amount': amount, 'text': f'bet {amount}'}

    def _raise(self, player: Player, amount: int) -> Dict[str, Any]:
        need = self.to_call(player) + amount
        if need > player.chips:
            # not enough behind for the raise: the player still wants in, so call
            logging.info(f"{player.name} cannot cover a raise of {amount}; calling instead")
            return self._call(player)
        if not self.others_can_call_more(player):
            raise InvalidAction("Nobody left to call a raise. Call or fold.")
        if amount < self.min_bet:
            raise InvalidAction(f"Invalid raise. Minimum is {self.min_bet}.")
        self._commit(player, need)
        if player.all_in:
            return {'kind': 'allin', 'amount': need, 'text': f'all-in {need}'}
        return {'kind': 'raise', 'amount': need, 'text': f'raised to {self.current_bet}'}

    def _all_in(self, player: Player) -> Dict[str, Any]:
        amount = player.chips
        self._commit(player, amount)
        return {'kind': 'allin', 'amount': amount, 'text': f'all-in {amount}'}


class BettingEngine:
    """Runs betting rounds by asking each seat on turn for a decision."""

    def __init__(self, game_engine):
        self.game_engine = game_engine

    async def betting_round(self, title: str = "Betting round") -> int:
        """Play one street to completion and return the chips it moved into the pot."""
        engine = self.game_engine
        engine.reset_round_bets()
        engine.notify({'ev': 'ROUND_START', 'title': title})

        rnd = BettingRound(
            players=engine.players,
            order=engine.action_order(),
            min_bet=engine.settings.min_bet,
        )
        while True:
            player = rnd.next_to_act()
            if player is None:
                break
            await self._take_turn(rnd, player, title)

        logging.debug(f"{title} finished: ${rnd.moved} moved, current bet ${rnd.current_bet}")
        return rnd.moved

    def decision_state(self, rnd: BettingRound, player: Player, title: str,
                       remaining: Optional[float], error: Optional[str]) -> Dict[str, Any]:
        state = self.game_engine.get_public_state(current_player_name=player.name)
        state.update({
            'phase': 'betting',
            'title': title,
            'legal': rnd.legal_actions(player),
            'hand': list(player.hand.cards) if player.hand else [],
            'timeout': remaining,
            'error': error,
        })
        return state

    async def _take_turn(self, rnd: BettingRound, player: Player, title: str) -> None:
        engine = self.game_engine
        loop = asyncio.get_running_loop()
        timeout = engine.settings.turn_timeout
        # re-asks after an invalid decision share this deadline
        deadline = loop.time() + timeout if timeout else None
        error = None

        while True:
            remaining = None if deadline is None else deadline - loop.time()
            state = self.decision_state(rnd, player, title, remaining, error)
            try:
                decision = await player.take_action(state, remaining)
            except asyncio.TimeoutError:
                result = rnd.fold_on_timeout(player)
                engine.last_fold_was_timeout = True
                engine.record(player, **result)
                return

            logging.debug("Player %s decision: %s", player.name, decision)
            if not isinstance(decision, dict):
                logging.info("Malformed decision from %s: %r", player.name, decision)
                error = "Malformed decision"
                continue
            if decision.get('action') == 'quit':
                rnd.skip_quitter(player)
                engine.handle_player_quit(player)
                return

            try:
                result = rnd.apply(player, decision)
            except InvalidAction as exc:
                logging.info("Rejected decision from %s (%s): %s", player.name, decision, exc)
                error = str(exc)
                continue

            if result['kind'] == 'fold':
                engine.last_fold_was_timeout = False
            engine.record(player, **result)
            return
