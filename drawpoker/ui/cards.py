"""
Card rendering for the terminal: coloured inline labels and
side-by-side card art with position numbers underneath.
"""

from typing import List, Sequence

from drawpoker.deck import RANK_NAMES, SUIT_SYMBOLS, Card
from .colors import Colors

# Card suit colors
SUIT_COLORS = {
    'h': Colors.RED,
    'd': Colors.RED,
    'c': Colors.BLACK,
    's': Colors.BLACK,
}


def card_label(card: Card) -> str:
    """A single card as coloured text, e.g. 'A♠'."""
    r, s = card
    color = SUIT_COLORS.get(s, '')
    return f"{Colors.BOLD}{Colors.BG_WHITE}{color}{RANK_NAMES.get(r, r)}{SUIT_SYMBOLS.get(s, s)}{Colors.RESET}"


def cards_inline(cards: Sequence[Card]) -> str:
    return " ".join(card_label(c) for c in cards)


def card_art(card: Card) -> List[str]:
    """Format a single card as five lines of art."""
    r, s = card
    rank = str(RANK_NAMES.get(r, r))
    symbol = SUIT_SYMBOLS.get(s, s)
    color = f"{Colors.BOLD}{Colors.BG_WHITE}{SUIT_COLORS.get(s, '')}"

    return [
        f"{color}╭───╮{Colors.RESET}",
        f"{color}│{rank} {symbol}│{Colors.RESET}",
        f"{color}│   │{Colors.RESET}",
        f"{color}│{symbol} {rank}│{Colors.RESET}",
        f"{color}╰───╯{Colors.RESET}",
    ]


def cards_horizontal(cards: Sequence[Card], numbered: bool = False) -> str:
    """Render cards side by side; `numbered` adds 1-5 under each card."""
    if not cards:
        return ""
    card_lines = [card_art(card) for card in cards]
    result_lines = [" ".join(lines[i] for lines in card_lines) for i in range(5)]
    if numbered:
        result_lines.append(" ".join(f"  {i}  " for i in range(1, len(cards) + 1)))
    return "\n".join(result_lines)
