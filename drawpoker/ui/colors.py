"""
ANSI color codes for the draw poker terminal.
"""


class Colors:
    """ANSI color codes for terminal formatting."""
    RED = '\033[31m'
    BLACK = '\033[30m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    GREY = '\033[90m'
    RESET = '\033[0m'
    BG_WHITE = '\033[47m'
    CLEAR_SCREEN = '\033[2J\033[H'


def paint(text: str, *codes: str) -> str:
    """Wrap `text` in the given codes and reset afterwards."""
    return f"{''.join(codes)}{text}{Colors.RESET}"
