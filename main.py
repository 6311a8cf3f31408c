"""
Entry point for Five-Card Draw poker.
Plays a hot-seat table in this terminal, or serves tables over SSH.
"""

import argparse
import asyncio
import logging

from drawpoker.console import StdioConsole
from drawpoker.game import GameExit
from drawpoker.session import configure, run_table
from drawpoker.settings import MAX_PLAYERS


async def play_local(args) -> None:
    console = StdioConsole()
    console.write("Five-Card Draw Poker (CLI)")
    settings = await configure(
        console,
        num_players=args.players,
        starting_chips=args.chips,
        turn_timeout_secs=args.timer,
        min_bet=args.min_bet,
        max_discards=args.max_discards,
    )
    names = [n.strip() for n in args.names.split(",")] if args.names else None
    await run_table(console, settings, names=names, show_private_log=args.debug)


async def serve(args) -> None:
    from drawpoker.ssh_server import SSHServer

    print("🃏 Starting draw poker SSH server")
    server = SSHServer(host=args.host, port=args.port, min_bet=args.min_bet, max_discards=args.max_discards)
    await server.serve_forever()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Five-Card Draw poker for 2-6 players")
    parser.add_argument("--players", type=int, help=f"Number of players (2-{MAX_PLAYERS})")
    parser.add_argument("--chips", type=int, help="Starting chips, a multiple of 10")
    parser.add_argument("--timer", type=int, help="Seconds per turn (0 disables the clock)")
    parser.add_argument("--min-bet", type=int, default=10, help="Minimum bet and raise")
    parser.add_argument("--max-discards", type=int, default=3, help="Cards a player may swap in the draw")
    parser.add_argument("--names", help="Comma separated player names")
    parser.add_argument("--ssh", action="store_true", help="Serve tables over SSH instead of playing here")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to with --ssh")
    parser.add_argument("--port", default=22222, type=int, help="Port to bind to with --ssh")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def cli() -> None:
    args = build_parser().parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)
    elif args.ssh:
        logging.basicConfig(level=logging.INFO)
    else:
        # keep the local table readable
        logging.basicConfig(level=logging.WARNING)
    # Suppress AsyncSSH's verbose connection messages
    logging.getLogger('asyncssh').setLevel(logging.WARNING)

    try:
        asyncio.run(serve(args) if args.ssh else play_local(args))
    except (KeyboardInterrupt, GameExit, EOFError):
        print("\n👋 Goodbye!")
    except ValueError as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    cli()
