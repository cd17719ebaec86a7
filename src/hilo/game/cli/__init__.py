"""CLI interface package for the Hi-Lo game engine."""

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

__all__ = [
    "CommandResult",
    "activate_game",
    "create_game",
    "generate_game",
    "list_games",
    "play_game",
    "show_config",
    "show_leaderboard",
    "validate_answers_file",
]
