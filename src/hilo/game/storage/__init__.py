"""Storage module for games, answer lists and player sessions."""

from hilo.game.storage.game_store import GameStore
from hilo.game.storage.submission_store import SubmissionStore

__all__ = [
    "GameStore",
    "SubmissionStore",
]
