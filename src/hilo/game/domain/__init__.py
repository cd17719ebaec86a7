"""Domain models for the game engine."""

from hilo.game.domain.entities import (
    Devotional,
    FunFact,
    Game,
    GameAnswer,
    GameStatus,
    GeneratedGame,
    HistoricalFact,
    LeaderboardEntry,
    PlayerSession,
    RankedAnswer,
    RoundDirection,
    RoundResult,
    RoundSubmission,
)
from hilo.game.domain.errors import (
    AnswerSetValidationError,
    ClassifierError,
    ClassifierParseError,
    ClassifierUnavailableError,
    DuplicateAnswerError,
    GameClosedError,
    GameNotFoundError,
    HiLoError,
    InvalidArgumentError,
    ScoringOperationError,
    StorageError,
)

__all__ = [
    "Devotional",
    "FunFact",
    "Game",
    "GameAnswer",
    "GameStatus",
    "GeneratedGame",
    "HistoricalFact",
    "LeaderboardEntry",
    "PlayerSession",
    "RankedAnswer",
    "RoundDirection",
    "RoundResult",
    "RoundSubmission",
    "AnswerSetValidationError",
    "ClassifierError",
    "ClassifierParseError",
    "ClassifierUnavailableError",
    "DuplicateAnswerError",
    "GameClosedError",
    "GameNotFoundError",
    "HiLoError",
    "InvalidArgumentError",
    "ScoringOperationError",
    "StorageError",
]
