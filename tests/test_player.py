import asyncio

import pytest

from drawpoker.player import Player, PlayerManager


def test_commit_moves_chips_into_both_counters():
    p = Player("alice", chips=100)
    p.reset_for_hand()
    assert p.commit(30) == 30
    assert p.chips == 70
    assert p.contributed_this_round == 30
    assert p.contributed_total == 30
    p.reset_for_round()
    p.commit(70)
    assert p.all_in is True
    assert p.contributed_this_round == 70
    assert p.contributed_total == 100


def test_commit_rejects_more_than_stack():
    p = Player("bob", chips=10)
    with pytest.raises(ValueError):
        p.commit(11)
    with pytest.raises(ValueError):
        p.commit(-1)
    assert p.chips == 10


def test_reset_for_hand_sits_out_broke_players():
    broke = Player("carol", chips=0)
    broke.reset_for_hand()
    assert broke.folded is True
    assert broke.hand is None
    assert broke.can_act() is False

    p = Player("dave", chips=50)
    p.folded = True
    p.all_in = True
    p.revealed_on_fold = [1]
    p.reset_for_hand()
    assert p.folded is False
    assert p.all_in is False
    assert p.revealed_on_fold == []
    assert p.hand is not None and len(p.hand) == 0
    assert p.in_hand


@pytest.mark.asyncio
async def test_take_action_with_sync_and_async_actor():
    p = Player("erin")
    p.actor = lambda state: {'action': 'check'}
    assert await p.take_action({}) == {'action': 'check'}

    async def actor(state):
        return {'action': 'fold'}

    p.actor = actor
    assert await p.take_action({}, timeout=1) == {'action': 'fold'}


@pytest.mark.asyncio
async def test_take_action_times_out():
    p = Player("frank")

    async def slow(state):
        await asyncio.sleep(5)
        return {'action': 'check'}

    p.actor = slow
    with pytest.raises(asyncio.TimeoutError):
        await p.take_action({}, timeout=0.01)
    with pytest.raises(asyncio.TimeoutError):
        await p.take_action({}, timeout=0)


@pytest.mark.asyncio
async def test_take_action_without_actor():
    with pytest.raises(NotImplementedError):
        await Player("gina").take_action({})


def test_player_manager_seats_in_order_and_validates_names():
    manager = PlayerManager(max_players=2)
    a = manager.register_player("  Alice ", chips=100)
    b = manager.register_player("Bob", chips=100)
    assert (a.name, a.seat) == ("Alice", 0)
    assert b.seat == 1
    with pytest.raises(RuntimeError):
        manager.register_player("Carol")


def test_player_manager_rejects_bad_names():
    manager = PlayerManager()
    manager.register_player("Alice")
    with pytest.raises(ValueError):
        manager.register_player("alice")
    with pytest.raises(ValueError):
        manager.register_player("   ")
    with pytest.raises(ValueError):
        manager.register_player("x" * 21)
