"""
CountrySnap CLI - Command-line interface for the game.

Usage:
    countrysnap serve                 Run the REST API
    countrysnap play [names...]       Play in the terminal
    countrysnap leaderboard           Print the stored leaderboard
"""

import argparse
import logging
import sys
import time

from .config import Config
from .engine_core.state import RoundStatus


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="CountrySnap - Guess the country from its outline",
        prog="countrysnap",
    )
    parser.add_argument("--log-level", default=Config.LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("names", nargs="*", help="Player names, in turn order")
    play_parser.add_argument("--seed", type=int, help="Random seed for target draws")
    play_parser.add_argument("--offline", action="store_true", help="Skip facts and hint services")

    # Leaderboard command
    board_parser = subparsers.add_parser("leaderboard", help="Print the stored leaderboard")
    board_parser.add_argument("--limit", type=int, default=10, help="Rows to show")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "leaderboard":
        cmd_leaderboard(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "countrysnap.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


def cmd_play(args):
    """Pass-and-play in the terminal. Type ? for a hint, ! to give up."""
    from .hints import CannedHintGenerator
    from .session import GameManager, NoFacts

    manager = GameManager.from_config()
    if args.offline:
        manager.facts = NoFacts()
        manager.hints = CannedHintGenerator()

    game = manager.create_game(seed=args.seed)
    loop = game.loop
    if loop.snapshot().catalog_error:
        print(f"Error: {loop.snapshot().catalog_error}")
        manager.shutdown()
        sys.exit(1)

    for name in args.names:
        loop.add_player(name)
    loop.start_session()

    try:
        while True:
            _play_round(loop)
            state = loop.snapshot()
            print(_scoreline(state))
            again = input("Next player? [Y/n] ").strip().lower()
            if again.startswith("n"):
                break
            loop.start_round()
    except (KeyboardInterrupt, EOFError):
        print()
    finally:
        loop.end_session()
        entries = loop.snapshot().leaderboard
        manager.shutdown()

    _print_entries(entries[:10])


def _play_round(loop):
    state = loop.snapshot()
    print(f"\n{state.current_player.name}, get ready...")
    while loop.snapshot().status == RoundStatus.LOADING:
        time.sleep(0.1)

    seen_hints = 0
    while True:
        state = loop.snapshot()
        for hint in state.round.hints[seen_hints:]:
            print(f"  Hint: {hint}")
        seen_hints = len(state.round.hints)

        if state.status.is_resolved:
            facts = state.target.facts
            answer = facts.name if facts else state.target.shape.name
            verdict = "Correct!" if state.status == RoundStatus.SUCCESS else "Out of luck."
            print(f"{verdict} It was {answer}.")
            if facts and facts.capital:
                print(f"  Capital: {facts.capital}  Region: {facts.region}")
            return

        text = input(f"[{state.round.lives_remaining} lives] Guess: ").strip()
        if text == "?":
            loop.request_hint()
            while loop.snapshot().hint_in_flight:
                time.sleep(0.1)
        elif text == "!":
            loop.skip()
        else:
            result = loop.guess(text)
            if result.success and loop.snapshot().round.message:
                print(f"  {loop.snapshot().round.message}")


def _scoreline(state):
    return "  ".join(f"{p.name}: {p.score}" for p in state.players)


def cmd_leaderboard(args):
    """Print the top of the stored leaderboard."""
    from .leaderboard import JsonLeaderboardStore, record

    if not Config.LEADERBOARD_PATH:
        print("No leaderboard file configured")
        return

    entries = record(JsonLeaderboardStore(Config.LEADERBOARD_PATH).load(), [])
    _print_entries(entries[:args.limit])


def _print_entries(entries):
    if not entries:
        print("No scores yet")
        return
    for rank, entry in enumerate(entries, start=1):
        print(f"{rank:>3}. {entry.name:<20} {entry.score:>5}  {entry.timestamp[:10]}")


if __name__ == "__main__":
    main()
