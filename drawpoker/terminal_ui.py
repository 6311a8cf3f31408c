"""
Terminal renderer for draw poker with colours and cards.

This keeps presentation out of the engines: front ends call
`TerminalUI.render(state)` for the seat on turn and `render_event(event)`
for the running commentary, and write the strings wherever they like.
"""

from typing import Any, Dict, List, Optional, Tuple

from .ui.colors import Colors, paint
from .ui.cards import cards_horizontal, cards_inline

MenuEntry = Tuple[int, str, str]  # (number, action, label)


def betting_menu(legal: Dict[str, Any]) -> List[MenuEntry]:
    """Number the legal betting actions the way they are shown on screen."""
    labels = {
        'check': "Check",
        'bet': f"Bet <amt>=min {legal['min_bet']}",
        'raise': f"Raise <amt>=min {legal['min_bet']}",
        'fold': "Fold [cards to show]",
        'allin': "All-in",
        'quit': "Quit game",
    }
    call = f"Call {legal['to_call']}"
    if legal.get('call_is_all_in'):
        call += " (all-in)"
    labels['call'] = call
    return [(n, action, labels[action]) for n, action in enumerate(legal['actions'], 1)]


def _seconds(timeout: Optional[float]) -> str:
    if timeout is None:
        return ""
    return f" You have {max(int(timeout), 0)} seconds."


class TerminalUI:
    def __init__(self, title: str = "FIVE-CARD DRAW"):
        self.title = title

    def render(self, state: Dict[str, Any]) -> str:
        """Render the table as seen by the seat on turn. Cards stay hidden."""
        out = [paint(f"🃏 {self.title} 🃏", Colors.BOLD, Colors.YELLOW)]
        out.append(paint(f"Hand {state.get('hand_number', 0)}, dealer {state.get('dealer')}", Colors.DIM))
        out.append("")

        out.append(f"Players still in: {', '.join(state.get('still_in', []))}")
        folded = state.get('folded', [])
        if folded:
            shown = []
            for name, cards in folded:
                shown.append(f"{name} [{cards_inline(cards)}]" if cards else name)
            out.append(f"Players folded: {', '.join(shown)}")
        else:
            out.append("Players folded: none")

        out.append(paint(f"💰 Pot: {state.get('pot', 0)}", Colors.BOLD, Colors.GREEN))
        if state.get('phase') == 'betting':
            out.append(f"Current bet: {state['legal']['current_bet']}")

        current = state.get('current_player')
        stack = next((chips for name, chips, _, _ in state.get('players', []) if name == current), 0)
        out.append(paint(f"Action on: {current}. Stack: {stack} chips.{_seconds(state.get('timeout'))}",
                         Colors.BOLD, Colors.CYAN))

        history = state.get('action_history') or []
        if history:
            out.append("")
            out.append(paint("📜 Recent actions:", Colors.BOLD, Colors.CYAN))
            for action in history[-5:]:
                out.append(paint(f"  {action}", Colors.DIM))

        if state.get('error'):
            out.append("")
            out.append(paint(state['error'], Colors.RED))
        return "\n".join(out)

    def render_betting_menu(self, legal: Dict[str, Any]) -> str:
        opts = ["[0] View hand"] + [f"[{n}] {label}" for n, _, label in betting_menu(legal)]
        return (f"Actions: {'  '.join(opts)}\n"
                "Type action number (and amount if needed). Type 'exit' to quit program.")

    def render_draw_prompt(self, max_discards: int) -> str:
        return (f"Enter card numbers to discard (1-5, space-separated, up to {max_discards}) or 'stand'. "
                "Type 0 to view hand. Type 'quit' to fold and leave game or 'exit' to quit program.")

    def render_hand(self, cards) -> str:
        return paint("🎴 Your cards:", Colors.BOLD, Colors.YELLOW) + "\n" + cards_horizontal(cards, numbered=True)

    def render_event(self, event: Dict[str, Any]) -> Optional[str]:
        """One line (or a few) of commentary for a public event."""
        ev = event.get('ev')
        if ev == 'HAND_START':
            return paint(f"=== Hand {event['hand_number']}, dealer {event['dealer']} ===", Colors.BOLD)
        if ev == 'ROUND_START':
            if 'max_discards' in event:
                return paint(f"--- Draw phase (up to {event['max_discards']} cards) ---", Colors.BOLD)
            return paint(f"--- {event['title']} ---", Colors.BOLD)
        if ev in ('DEAL', 'ACTION'):
            line = f"{event['player']} {event['text']}"
            if event.get('shows'):
                line += f" and shows [{cards_inline(event['shows'])}]"
            if event.get('kind') == 'win':
                return paint(line, Colors.GREEN)
            return line
        if ev == 'SHOWDOWN':
            lines = [paint("Showdown:", Colors.BOLD, Colors.MAGENTA)]
            for name, cards, description in event['hands']:
                lines.append(f"  {name}: [{cards_inline(cards)}] {description}")
            return "\n".join(lines)
        if ev == 'POT_AWARD':
            winners = ", ".join(f"{name} wins {share}" for name, share in event['shares'].items())
            hand = f" with {event['hand']}" if event.get('hand') else ""
            return f"  Pot of {event['amount']} chips: {winners}{hand}"
        if ev == 'HAND_END':
            stacks = ", ".join(f"{name} {chips}" for name, chips in event['stacks'].items())
            return paint(f"Stacks: {stacks}", Colors.DIM)
        return None
