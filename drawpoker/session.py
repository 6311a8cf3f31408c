"""
A hot-seat table session on one console.

Used by the local command line and by each SSH connection: gather any
settings not already known, seat the players, play until one holds every
chip, then offer a rematch.
"""

import logging
import random
from typing import List, Optional

from drawpoker.action_log import TableLog
from drawpoker.console import TerminalActor, ask_yes_no, event_printer, prompt_number, seat_players
from drawpoker.game import Game
from drawpoker.settings import MAX_PLAYERS, MIN_PLAYERS, GameSettings
from drawpoker.terminal_ui import TerminalUI


async def configure(console, num_players: Optional[int] = None, starting_chips: Optional[int] = None,
                    turn_timeout_secs: Optional[int] = None, min_bet: int = 10,
                    max_discards: int = 3) -> GameSettings:
    """Build validated settings, prompting for whatever was not supplied."""
    if num_players is None:
        num_players = await prompt_number(console, "Number of players", MIN_PLAYERS, MAX_PLAYERS)
    if starting_chips is None:
        starting_chips = await prompt_number(console, "Starting chips (increments of 10)", 10, 10_000, 10)
    if turn_timeout_secs is None:
        turn_timeout_secs = await prompt_number(console, "Turn timer (seconds)", 5, 300)
    return GameSettings(
        num_players=num_players,
        starting_chips=starting_chips,
        min_bet=min_bet,
        turn_timeout_secs=turn_timeout_secs,
        max_discards=max_discards,
    ).validate()


async def run_table(console, settings: GameSettings, names: Optional[List[str]] = None,
                    rng: Optional[random.Random] = None, show_private_log: bool = False) -> None:
    """Play tables with the same settings until the players decline a rematch."""
    ui = TerminalUI()
    while True:
        manager = await seat_players(console, settings, names)
        game = Game(manager.players, settings, rng)
        log = TableLog()
        game.subscribe(log)
        game.subscribe(event_printer(console, ui))
        actor = TerminalActor(console, ui)
        for p in manager.players:
            p.actor = actor
        logging.info(f"{log.table_name}: {', '.join(p.name for p in manager.players)}")

        winner = await game.play_until_winner()
        console.write(f"Winner: {winner.name}")
        console.write(log.dump())
        if show_private_log:
            console.write(log.dump_private())

        if not await ask_yes_no(console, "Start a new game with same settings? [y/N]"):
            return
