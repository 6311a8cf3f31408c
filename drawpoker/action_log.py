"""
Per-table action log.

`TableLog` subscribes to a GameEngine and keeps one `HandLog` per hand:
public actions anyone at the table could see, and a private record of
the cards each player held.  Nothing is written to disk.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class LogEntry:
    timestamp: int
    player: str
    action: str


@dataclass
class HandLog:
    events: List[LogEntry] = field(default_factory=list)
    private: List[LogEntry] = field(default_factory=list)


class TableLog:
    def __init__(self, table_name: Optional[str] = None):
        self.table_name = table_name or f"table-{int(time.time())}"
        self.hands: List[HandLog] = []

    def start_hand(self) -> None:
        self.hands.append(HandLog())

    def log_action(self, player: str, action: str) -> None:
        if self.hands:
            self.hands[-1].events.append(LogEntry(_now_ms(), player, action))

    def log_private(self, player: str, action: str) -> None:
        if self.hands:
            self.hands[-1].private.append(LogEntry(_now_ms(), player, action))

    def __call__(self, event: Dict[str, Any]) -> None:
        """Event listener: file engine events under the current hand."""
        ev = event.get('ev')
        if ev == 'HAND_START':
            self.start_hand()
        elif ev in ('ACTION', 'DEAL'):
            self.log_action(event['player'], f"{event['text']} (stack: {event['stack']})")
        elif ev == 'PRIVATE':
            self.log_private(event['player'], event['text'])

    def _dump(self, title: str, attr: str) -> str:
        lines = [f"=== {title}: {self.table_name} ==="]
        for i, hand in enumerate(self.hands, 1):
            lines.append(f"-- Hand {i} --")
            for e in getattr(hand, attr):
                lines.append(f"[{e.timestamp}] {e.player}: {e.action}")
        return "\n".join(lines)

    def dump(self) -> str:
        return self._dump("Table Log", 'events')

    def dump_private(self) -> str:
        return self._dump("Private Card Log", 'private')
