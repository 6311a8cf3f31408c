import asyncio
import random

import pytest

from drawpoker.betting_engine import BettingEngine, BettingRound, InvalidAction
from drawpoker.game_engine import GameEngine
from drawpoker.settings import GameSettings


def make_table(players, timeout=0, **kwargs):
    settings = GameSettings(num_players=len(players), turn_timeout_secs=timeout, **kwargs)
    engine = GameEngine(players, settings, rng=random.Random(1))
    engine.reset_hand()
    return engine


@pytest.mark.asyncio
async def test_betting_round_basic_flow(make_player):
    # alice deals, so bob acts first
    alice = make_player("alice", actions=[{"action": "fold"}])
    bob = make_player("bob", actions=[{"action": "bet", "amount": 10}])
    carol = make_player("carol", actions=[{"action": "call"}])
    engine = make_table([alice, bob, carol])

    moved = await BettingEngine(engine).betting_round()

    assert moved == 20
    assert engine.total_pot() == 20
    assert bob.chips == 190 and carol.chips == 190 and alice.chips == 200
    assert alice.folded
    assert engine.action_history == ["bob bet 10", "carol called 10", "alice folded"]


@pytest.mark.asyncio
async def test_all_check_ends_after_everyone_acts(make_player):
    alice = make_player("alice", actions=[{"action": "check"}])
    bob = make_player("bob", actions=[{"action": "check"}])
    engine = make_table([alice, bob])

    assert await BettingEngine(engine).betting_round() == 0
    assert engine.action_history == ["bob checked", "alice checked"]


@pytest.mark.asyncio
async def test_call_with_nothing_owed_is_a_check(make_player):
    alice = make_player("alice", actions=[{"action": "call"}])
    bob = make_player("bob", actions=[{"action": "call"}])
    engine = make_table([alice, bob])

    await BettingEngine(engine).betting_round()
    assert engine.action_history == ["bob checked", "alice checked"]


@pytest.mark.asyncio
async def test_raise_reopens_action(make_player):
    alice = make_player("alice", actions=[{"action": "raise", "amount": 20}])
    bob = make_player("bob", actions=[{"action": "bet", "amount": 10}, {"action": "call"}])
    engine = make_table([alice, bob])

    moved = await BettingEngine(engine).betting_round()

    assert moved == 60
    assert alice.chips == 170 and bob.chips == 170
    assert engine.action_history == ["bob bet 10", "alice raised to 30", "bob called 20"]


@pytest.mark.asyncio
async def test_invalid_bet_is_rejected_and_asked_again(make_player):
    alice = make_player("alice", actions=[{"action": "call"}])
    bob = make_player("bob", actions=[
        {"action": "bet", "amount": 5},
        {"action": "bet", "amount": 500},
        {"action": "bet", "amount": 10},
    ])
    engine = make_table([alice, bob])

    await BettingEngine(engine).betting_round()

    states = bob.script.states
    assert len(states) == 3
    assert states[0]['error'] is None
    assert "at least 10" in states[1]['error']
    assert "between" in states[2]['error']
    assert bob.chips == 190 and alice.chips == 190


@pytest.mark.asyncio
async def test_short_all_in_does_not_reopen_betting(make_player):
    alice = make_player("alice", actions=[{"action": "call"}])
    bob = make_player("bob", actions=[{"action": "bet", "amount": 20}, {"action": "call"}])
    carol = make_player("carol", chips=25, actions=[{"action": "allin"}])
    engine = make_table([alice, bob, carol])

    moved = await BettingEngine(engine).betting_round()

    assert moved == 75
    assert carol.all_in and carol.chips == 0
    assert alice.contributed_this_round == bob.contributed_this_round == 25
    # bob only had to top up his bet; nobody was asked twice otherwise
    assert len(alice.script.states) == 1
    assert engine.action_history[-1] == "bob called 5"


@pytest.mark.asyncio
async def test_raise_without_chips_becomes_a_call(make_player):
    alice = make_player("alice", actions=[{"action": "fold"}])
    bob = make_player("bob", actions=[{"action": "bet", "amount": 50}])
    carol = make_player("carol", chips=60, actions=[{"action": "raise", "amount": 30}])
    engine = make_table([alice, bob, carol])

    await BettingEngine(engine).betting_round()

    assert carol.chips == 10
    assert carol.contributed_this_round == 50
    assert "carol called 50" in engine.action_history


@pytest.mark.asyncio
async def test_fold_ends_heads_up_round_immediately(make_player):
    alice = make_player("alice", actions=[])
    bob = make_player("bob", actions=[{"action": "fold"}])
    engine = make_table([alice, bob])

    await BettingEngine(engine).betting_round()

    assert bob.folded
    assert alice.script.states == []
    assert engine.live_players() == [alice]


@pytest.mark.asyncio
async def test_timeout_folds_the_seat(make_player):
    async def too_slow(state):
        await asyncio.sleep(5)

    alice = make_player("alice", actions=[])
    bob = make_player("bob")
    bob.actor = too_slow
    engine = make_table([alice, bob], timeout=1)

    await BettingEngine(engine).betting_round()

    assert bob.folded
    assert engine.last_fold_was_timeout is True
    assert engine.action_history == ["bob folded (timeout)"]


@pytest.mark.asyncio
async def test_reprompt_shares_the_turn_deadline(make_player):
    states = []

    async def bob_actor(state):
        states.append(state)
        if len(states) == 1:
            await asyncio.sleep(0.3)
            return {"action": "bet", "amount": 1}
        return {"action": "bet", "amount": 10}

    alice = make_player("alice", actions=[{"action": "call"}])
    bob = make_player("bob")
    bob.actor = bob_actor
    engine = make_table([alice, bob], timeout=5)

    await BettingEngine(engine).betting_round()

    first, second = states
    assert first['timeout'] == pytest.approx(5, abs=0.2)
    assert second['timeout'] < first['timeout'] - 0.25
    assert second['error']


@pytest.mark.asyncio
async def test_quit_shares_stack_and_round_continues(make_player):
    alice = make_player("alice", actions=[{"action": "check"}])
    bob = make_player("bob", actions=[{"action": "quit"}])
    carol = make_player("carol", actions=[{"action": "check"}])
    engine = make_table([alice, bob, carol])

    await BettingEngine(engine).betting_round()

    assert bob.chips == 0 and bob.folded
    assert alice.chips == 300 and carol.chips == 300
    assert engine.action_history == ["bob quit", "carol checked", "alice checked"]


@pytest.mark.asyncio
async def test_fold_can_show_cards(make_player):
    alice = make_player("alice", actions=[{"action": "check"}])
    bob = make_player("bob", actions=[{"action": "fold", "reveal": [0, 2, 9]}])
    engine = make_table([alice, bob])
    engine.deal_hands()
    events = []
    engine.subscribe(events.append)

    await BettingEngine(engine).betting_round()

    assert bob.revealed_on_fold == [0, 2]
    fold = [e for e in events if e['ev'] == 'ACTION'][0]
    assert fold['shows'] == [bob.hand.cards[0], bob.hand.cards[2]]
    assert engine.get_public_state()['folded'] == [("bob", fold['shows'])]


@pytest.mark.asyncio
async def test_chips_are_conserved_through_a_round(make_player):
    alice = make_player("alice", actions=[{"action": "raise", "amount": 40}, {"action": "call"}])
    bob = make_player("bob", chips=120, actions=[{"action": "bet", "amount": 30}, {"action": "allin"}])
    carol = make_player("carol", actions=[{"action": "call"}, {"action": "fold"}])
    engine = make_table([alice, bob, carol])
    before = engine.total_chips()

    await BettingEngine(engine).betting_round()

    assert engine.total_chips() == before
    assert bob.all_in
    assert carol.folded
    assert alice.contributed_this_round == 120


def test_step_function_rejects_out_of_turn_and_folded_seats(make_player):
    alice, bob = make_player("alice"), make_player("bob")
    engine = make_table([alice, bob])
    rnd = BettingRound(players=engine.players, order=engine.action_order(), min_bet=10)

    assert rnd.next_to_act() is bob
    with pytest.raises(RuntimeError):
        rnd.apply(alice, {"action": "check"})

    rnd.apply(bob, {"action": "bet", "amount": 10})
    with pytest.raises(InvalidAction):
        rnd.apply(alice, {"action": "check"})
    with pytest.raises(InvalidAction):
        rnd.apply(alice, {"action": "dance"})
    with pytest.raises(InvalidAction):
        rnd.apply(alice, {"action": "raise", "amount": "lots"})
    # rejected decisions leave the state alone
    assert alice.chips == 200 and rnd.current_bet == 10

    rnd.apply(alice, {"action": "fold"})
    assert rnd.is_complete()
    with pytest.raises(RuntimeError):
        rnd.apply(alice, {"action": "check"})


def test_legal_actions_menu(make_player):
    alice, bob = make_player("alice"), make_player("bob", chips=15)
    engine = make_table([alice, bob])
    rnd = BettingRound(players=engine.players, order=engine.action_order(), min_bet=10)

    menu = rnd.legal_actions(bob)
    assert menu['actions'] == ['check', 'bet', 'fold', 'allin', 'quit']

    rnd.apply(bob, {"action": "bet", "amount": 10})
    menu = rnd.legal_actions(alice)
    # bob has 5 behind, so alice can still raise him
    assert menu['actions'] == ['call', 'raise', 'fold', 'allin', 'quit']
    assert menu['to_call'] == 10

    rnd.apply(alice, {"action": "raise", "amount": 20})
    menu = rnd.legal_actions(bob)
    # bob cannot cover the call: no raise, no separate all-in
    assert menu['actions'] == ['call', 'fold', 'quit']
    assert menu['to_call'] == 5
    assert menu['call_is_all_in'] is True


def test_round_with_everyone_all_in_is_complete(make_player):
    alice, bob = make_player("alice", chips=10), make_player("bob", chips=10)
    engine = make_table([alice, bob])
    rnd = BettingRound(players=engine.players, order=engine.action_order(), min_bet=10)
    rnd.apply(bob, {"action": "allin"})
    assert rnd.next_to_act() is alice
    rnd.apply(alice, {"action": "call"})
    assert alice.all_in
    assert rnd.next_to_act() is None


@pytest.mark.asyncio
async def test_malformed_decision_is_asked_again(make_player):
    alice = make_player("alice", actions=[{"action": "check"}])
    bob = make_player("bob", actions=["call", None, {"action": "check"}])
    engine = make_table([alice, bob])

    await BettingEngine(engine).betting_round()

    states = bob.script.states
    assert len(states) == 3
    assert states[1]['error'] == "Malformed decision"
    assert states[2]['error'] == "Malformed decision"
    assert engine.action_history == ["bob checked", "alice checked"]


@pytest.mark.asyncio
async def test_fractional_amount_is_rejected(make_player):
    alice = make_player("alice", actions=[{"action": "call"}])
    bob = make_player("bob", actions=[{"action": "bet", "amount": 10.9}, {"action": "bet", "amount": 10.0}])
    engine = make_table([alice, bob])

    await BettingEngine(engine).betting_round()

    assert "whole number" in bob.script.states[1]['error']
    assert engine.action_history == ["bob bet 10", "alice called 10"]


def test_bet_or_raise_needs_someone_to_call_it(make_player):
    alice, bob = make_player("alice"), make_player("bob", chips=10)
    engine = make_table([alice, bob])
    # bob went all-in on an earlier street
    bob.commit(10)
    rnd = BettingRound(players=engine.players, order=engine.action_order(), min_bet=10)

    assert rnd.next_to_act() is alice
    assert 'bet' not in rnd.legal_actions(alice)['actions']
    with pytest.raises(InvalidAction):
        rnd.apply(alice, {"action": "bet", "amount": 20})
    with pytest.raises(InvalidAction):
        rnd.apply(alice, "check")
    assert alice.chips == 200 and rnd.current_bet == 0

    rnd.apply(alice, {"action": "check"})
    assert rnd.next_to_act() is None


def test_raise_into_an_all_in_is_rejected(make_player):
    alice, bob = make_player("alice"), make_player("bob", chips=15)
    engine = make_table([alice, bob])
    rnd = BettingRound(players=engine.players, order=engine.action_order(), min_bet=10)
    rnd.apply(bob, {"action": "allin"})

    assert rnd.legal_actions(alice)['actions'] == ['call', 'fold', 'allin', 'quit']
    with pytest.raises(InvalidAction):
        rnd.apply(alice, {"action": "raise", "amount": 20})
    assert alice.chips == 200

    rnd.apply(alice, {"action": "call"})
    assert alice.contributed_this_round == 15
    assert rnd.next_to_act() is None
