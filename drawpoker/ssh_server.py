"""
SSH front end for draw poker.

Every connection gets its own hot-seat table played through that one
terminal; tables never share state.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import asyncssh

from drawpoker.console import SSHConsole
from drawpoker.game import GameExit
from drawpoker.session import configure, run_table
from drawpoker.ui.colors import Colors, paint
from drawpoker.version import __version__

DEFAULT_HOST_KEY = Path(__file__).resolve().parent.parent / "drawpoker_host_key"


class _OpenServer(asyncssh.SSHServer):
    """Anyone may connect; the table is private to the connection."""

    def connection_made(self, conn):
        logging.info(f"SSH connection from {conn.get_extra_info('peername')}")

    def begin_auth(self, username):
        return False


class SSHServer:
    def __init__(self, host: str = "0.0.0.0", port: int = 22222, host_key_path: Optional[Path] = None,
                 min_bet: int = 10, max_discards: int = 3):
        self.host = host
        self.port = port
        self.host_key_path = Path(host_key_path) if host_key_path else DEFAULT_HOST_KEY
        self.min_bet = min_bet
        self.max_discards = max_discards
        self._server = None

    def ensure_host_key(self) -> Path:
        """Generate a host key on first start."""
        if not self.host_key_path.exists():
            key = asyncssh.generate_private_key("ssh-rsa")
            self.host_key_path.write_bytes(key.export_private_key())
            self.host_key_path.chmod(0o600)
            logging.info(f"Generated SSH host key at {self.host_key_path}")
        return self.host_key_path

    async def handle_client(self, process) -> None:
        console = SSHConsole(process)
        console.write(paint(f"Five-Card Draw Poker v{__version__}", Colors.BOLD, Colors.YELLOW))
        try:
            settings = await configure(console, min_bet=self.min_bet, max_discards=self.max_discards)
            await run_table(console, settings)
        except (GameExit, EOFError, asyncssh.BreakReceived):
            pass
        except Exception:
            logging.exception("Table on SSH connection failed")
        finally:
            console.write("Goodbye!")
            process.exit(0)

    async def start(self) -> None:
        self._server = await asyncssh.create_server(
            _OpenServer,
            self.host,
            self.port,
            server_host_keys=[str(self.ensure_host_key())],
            process_factory=self.handle_client,
            reuse_address=True,
        )
        logging.info(f"SSH server listening on {self.host}:{self.port}")

    async def serve_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            pass
