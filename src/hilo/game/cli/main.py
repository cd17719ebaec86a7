"""Main entry point for the Hi-Lo CLI.

Usage:
    hilo config
    hilo games [--status <status>]
    hilo create-game --question <text> [--answers <file>]
    hilo validate-answers <file>
    hilo generate --devotional <file> [--game <id>]
    hilo activate --game <id> [--hours <n>]
    hilo play --game <id> --player <id> [--name <first name>]
    hilo leaderboard --game <id> [--limit <n>]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from hilo.config import ConfigLoader
from hilo.game.cli.commands import (
    CommandResult,
    activate_game,
    create_game,
    generate_game,
    list_games,
    play_game,
    show_config,
    show_leaderboard,
    validate_answers_file,
)
from hilo.game.cli.formatters import OutputFormatter, get_formatter
from hilo.game.domain.entities import GameStatus
from hilo.game.engine import HiLoEngine


def setup_logging(verbose: bool = False, level_name: Optional[str] = None) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, (level_name or "WARNING").upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hilo",
        description="Hi-Lo trivia game engine CLI",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results in JSON format",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config-dir",
        help="Directory holding game.yaml, models.yaml and agents.yaml",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("config", help="Show the active configuration")

    games_parser = subparsers.add_parser("games", help="List games")
    games_parser.add_argument(
        "--status",
        choices=[s.value for s in GameStatus if s != GameStatus.EXPIRED],
        help="Filter by status",
    )

    create_parser_ = subparsers.add_parser("create-game", help="Create a game")
    create_parser_.add_argument(
        "--question", "-q",
        default="",
        help="Core question for the game",
    )
    create_parser_.add_argument(
        "--answers", "-a",
        help="JSON file with a ranked answer list to seed",
    )

    validate_parser = subparsers.add_parser(
        "validate-answers",
        help="Validate an answer list or generation payload",
    )
    validate_parser.add_argument("file", help="JSON file to validate")

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a game from a devotional",
    )
    generate_parser.add_argument(
        "--devotional", "-d",
        required=True,
        help="JSON file with title, scripture_reference, scripture_text, reflection",
    )
    generate_parser.add_argument(
        "--game", "-g",
        help="Existing game ID to regenerate (default: create a new game)",
    )

    activate_parser = subparsers.add_parser("activate", help="Open a game for play")
    activate_parser.add_argument("--game", "-g", required=True, help="Game ID")
    activate_parser.add_argument(
        "--hours",
        type=float,
        default=168.0,
        help="Length of the play window in hours (default: 168)",
    )

    play_parser = subparsers.add_parser("play", help="Play a game interactively")
    play_parser.add_argument("--game", "-g", required=True, help="Game ID")
    play_parser.add_argument("--player", "-p", required=True, help="Player ID")
    play_parser.add_argument("--name", "-n", default="", help="Player first name")

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Show a game's leaderboard")
    leaderboard_parser.add_argument("--game", "-g", required=True, help="Game ID")
    leaderboard_parser.add_argument("--limit", type=int, help="Show only the top N players")

    return parser


class InteractiveCLI:
    def __init__(self, engine: HiLoEngine, formatter: OutputFormatter):
        self._engine = engine
        self._formatter = formatter

    def get_input(self) -> str:
        return input("\nYour answer: ").strip()

    def show_output(self, message: str) -> None:
        print(f"\n{message}")

    def _print_result(self, result: CommandResult) -> int:
        print(self._formatter.format_result(result))
        return 0 if result.success else 1

    def run_config(self) -> int:
        result = show_config(self._engine)
        print(self._formatter.format_config(result.data or {}))
        return 0

    def run_games(self, status: Optional[str] = None) -> int:
        result = list_games(self._engine, status)
        if result.success and result.data is not None:
            print(self._formatter.format_games(result.data.get("games", [])))
        else:
            print(self._formatter.format_error(result.message, result.error))
        return 0 if result.success else 1

    def run_create_game(self, question: str, answers_path: Optional[str]) -> int:
        return self._print_result(create_game(self._engine, question, answers_path))

    async def run_generate(self, devotional_path: str, game_id: Optional[str]) -> int:
        return self._print_result(await generate_game(self._engine, devotional_path, game_id))

    def run_activate(self, game_id: str, hours: float) -> int:
        return self._print_result(activate_game(self._engine, game_id, hours))

    async def run_play(self, game_id: str, player_id: str, first_name: str) -> int:
        result = await play_game(
            self._engine,
            game_id,
            player_id,
            first_name,
            self.get_input,
            self.show_output,
        )
        code = self._print_result(result)
        if result.success and not (result.data or {}).get("interrupted"):
            self.run_leaderboard(game_id, limit=10)
        return code

    def run_leaderboard(self, game_id: str, limit: Optional[int] = None) -> int:
        result = show_leaderboard(self._engine, game_id, limit)
        if result.success and result.data is not None:
            print(self._formatter.format_leaderboard(game_id, result.data["entries"]))
        else:
            print(self._formatter.format_error(result.message, result.error))
        return 0 if result.success else 1


async def async_main(args: argparse.Namespace) -> int:
    formatter = get_formatter(args.json)

    if args.command == "validate-answers":
        result = validate_answers_file(args.file)
        print(formatter.format_result(result))
        return 0 if result.success else 1

    engine = HiLoEngine(config_dir=args.config_dir)
    cli = InteractiveCLI(engine, formatter)

    try:
        if args.command == "config":
            return cli.run_config()

        elif args.command == "games":
            return cli.run_games(args.status)

        elif args.command == "create-game":
            return cli.run_create_game(args.question, args.answers)

        elif args.command == "generate":
            return await cli.run_generate(args.devotional, args.game)

        elif args.command == "activate":
            return cli.run_activate(args.game, args.hours)

        elif args.command == "play":
            return await cli.run_play(args.game, args.player, args.name)

        elif args.command == "leaderboard":
            return cli.run_leaderboard(args.game, args.limit)

        else:
            return 1

    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


def main() -> int:
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    log_level = ConfigLoader(args.config_dir).load_agents_config().observability.log_level
    setup_logging(args.verbose, log_level)
    return asyncio.run(async_main(args))


if __name__ == "__main__":
    sys.exit(main())
