"""
Terminal presentation helpers for draw poker.
"""

from .colors import Colors, paint
from .cards import card_label, cards_inline, cards_horizontal, SUIT_COLORS

__all__ = ['Colors', 'paint', 'card_label', 'cards_inline', 'cards_horizontal', 'SUIT_COLORS']
