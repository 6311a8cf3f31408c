"""
Console adapters and the human actor.

A console is anything with `write(text)`, `clear()` and an async
`readline(prompt)`.  `StdioConsole` wraps the local terminal and
`SSHConsole` wraps an asyncssh process.  `TerminalActor` turns typed
commands into the decision dicts the engines expect.
"""

import asyncio
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

import asyncssh

from drawpoker.betting_engine import InvalidAction
from drawpoker.game import GameExit
from drawpoker.player import PlayerManager
from drawpoker.settings import GameSettings
from drawpoker.terminal_ui import TerminalUI, betting_menu
from drawpoker.ui.colors import Colors

YES = ('y', 'yes')


class StdioConsole:
    """The local terminal, read through an asyncio stream so reads can be cancelled."""

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._reader: Optional[asyncio.StreamReader] = None

    def write(self, text: str) -> None:
        self.stdout.write(text + "\n")
        self.stdout.flush()

    def clear(self) -> None:
        self.stdout.write(Colors.CLEAR_SCREEN)
        self.stdout.flush()

    async def _ensure_reader(self) -> asyncio.StreamReader:
        if self._reader is None:
            loop = asyncio.get_running_loop()
            reader = asyncio.StreamReader()
            await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), self.stdin)
            self._reader = reader
        return self._reader

    async def readline(self, prompt: str = "") -> str:
        if prompt:
            self.stdout.write(prompt)
            self.stdout.flush()
        reader = await self._ensure_reader()
        line = await reader.readline()
        if not line:
            raise EOFError("stdin closed")
        return line.decode('utf-8', errors='replace').rstrip("\r\n")


class SSHConsole:
    """One SSH connection; asyncssh's line editor handles echo and backspace."""

    def __init__(self, process):
        self.process = process

    def write(self, text: str) -> None:
        self.process.stdout.write(text.replace("\n", "\r\n") + "\r\n")

    def clear(self) -> None:
        self.process.stdout.write(Colors.CLEAR_SCREEN)

    async def readline(self, prompt: str = "") -> str:
        if prompt:
            self.process.stdout.write(prompt)
        while True:
            try:
                line = await self.process.stdin.readline()
                break
            except asyncssh.TerminalSizeChanged:
                # window resizes arrive as exceptions on the input stream
                continue
        if not line:
            raise EOFError("connection closed")
        return line.rstrip("\r\n")


async def ask_yes_no(console, question: str) -> bool:
    console.write(question)
    answer = await console.readline("> ")
    return answer.strip().lower() in YES


async def prompt_number(console, prompt: str, lo: int, hi: int, step: Optional[int] = None) -> int:
    """Ask for a number in [lo, hi] (a multiple of `step` if given) until one is typed."""
    step_str = f", step {step}" if step else ""
    while True:
        console.write(f"{prompt} [{lo}..{hi}{step_str}]:")
        line = (await console.readline("> ")).strip()
        if line.isdigit():
            value = int(line)
            if lo <= value <= hi and (not step or value % step == 0):
                return value
        console.write("Invalid input. Try again.")


async def seat_players(console, settings: GameSettings, names: Optional[List[str]] = None) -> PlayerManager:
    """Seat `settings.num_players` players, prompting for any names not given."""
    manager = PlayerManager(max_players=settings.num_players)
    names = list(names or [])
    for i in range(1, settings.num_players + 1):
        while True:
            if names:
                name = names.pop(0)
            else:
                name = (await console.readline(f"Name for player {i}: ")).strip() or f"Player {i}"
            try:
                manager.register_player(name, chips=settings.starting_chips)
                break
            except ValueError as e:
                console.write(str(e))
    return manager


def parse_betting_line(line: str, legal: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a numbered menu choice into a betting decision.

    '0' asks to view the hand.  Fold may be followed by card numbers (1-5)
    to show.  Raises InvalidAction for anything else it cannot read.
    """
    parts = line.strip().lower().split()
    if not parts or not parts[0].isdigit():
        raise InvalidAction("Invalid command.")
    choice = int(parts[0])
    if choice == 0:
        return {'action': 'view'}
    menu = {n: action for n, action, _ in betting_menu(legal)}
    action = menu.get(choice)
    if action is None:
        raise InvalidAction("Invalid command.")
    if action in ('bet', 'raise'):
        if len(parts) < 2 or not parts[1].isdigit():
            raise InvalidAction("Need an amount for that action.")
        return {'action': action, 'amount': int(parts[1])}
    if action == 'fold':
        shown = sorted({int(p) - 1 for p in parts[1:] if p.isdigit() and 1 <= int(p) <= 5})
        return {'action': 'fold', 'reveal': shown}
    return {'action': action}


def parse_draw_line(line: str) -> Dict[str, Any]:
    """Turn draw-phase input into a decision: 'stand', card numbers 1-5, '0' or 'quit'."""
    text = line.strip().lower()
    if text in ('', 'stand'):
        return {'action': 'stand'}
    if text == '0':
        return {'action': 'view'}
    if text == 'quit':
        return {'action': 'quit'}
    parts = text.split()
    if not all(p.isdigit() for p in parts):
        raise InvalidAction("Invalid command.")
    numbers = [int(p) for p in parts]
    if any(n < 1 or n > 5 for n in numbers):
        raise InvalidAction("Invalid command.")
    return {'action': 'discard', 'indices': [n - 1 for n in numbers]}


class TerminalActor:
    """Asks a human at a console for decisions; several can share one console."""

    def __init__(self, console, ui: Optional[TerminalUI] = None):
        self.console = console
        self.ui = ui or TerminalUI()

    async def __call__(self, state: Dict[str, Any]) -> Dict[str, Any]:
        if state.get('phase') == 'reveal':
            return {'action': 'reveal', 'show': await ask_yes_no(self.console, "Reveal your cards? [y/N]")}

        self.console.clear()
        self.console.write(self.ui.render(state))
        betting = state.get('phase') == 'betting'
        while True:
            if betting:
                legal = state['legal']
                self.console.write(self.ui.render_betting_menu(legal))
                prompt = f"(call {legal['to_call']} chips) > " if 'call' in legal['actions'] else "> "
            else:
                self.console.write(self.ui.render_draw_prompt(state['max_discards']))
                prompt = "> "

            line = await self.console.readline(prompt)
            if line.strip().lower() == 'exit':
                if await ask_yes_no(self.console, "Are you sure you want to exit? [y/N]"):
                    raise GameExit()
                self.console.write("Continuing game.")
                continue

            try:
                decision = parse_betting_line(line, legal) if betting else parse_draw_line(line)
            except InvalidAction as e:
                self.console.write(str(e))
                continue

            if decision['action'] == 'view':
                self.console.write(self.ui.render_hand(state['hand']))
                continue
            if decision['action'] == 'quit':
                if not await ask_yes_no(self.console, "Are you sure you want to leave the game? [y/N]"):
                    self.console.write("Continuing game.")
                    continue
            logging.debug(f"{state.get('current_player')} typed {line!r}")
            return decision


def event_printer(console, ui: Optional[TerminalUI] = None) -> Callable[[Dict[str, Any]], None]:
    """A GameEngine listener that writes public events to a console."""
    ui = ui or TerminalUI()

    def listener(event: Dict[str, Any]) -> None:
        text = ui.render_event(event)
        if text:
            console.write(text)

    return listener
