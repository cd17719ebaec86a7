"""Exception types raised by the Hi-Lo game engine."""

from __future__ import annotations


class HiLoError(Exception):
    """Base class for all game engine errors."""


class InvalidArgumentError(HiLoError, ValueError):
    """Raised for out-of-range round numbers or ranks."""


class AnswerSetValidationError(HiLoError):
    """Raised when a generated answer set is rejected as a whole."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ClassifierError(HiLoError):
    pass


class ClassifierUnavailableError(ClassifierError):
    pass


class ClassifierParseError(ClassifierError):
    pass


class DuplicateAnswerError(HiLoError):
    """Raised by the answer store when the normalized text is already cached."""

    def __init__(self, game_id: str, answer: str):
        super().__init__(f"Answer already exists for game {game_id}: {answer!r}")
        self.game_id = game_id
        self.answer = answer


class ScoringOperationError(HiLoError):
    """The scoring operation failed; the player may retry."""


class GameNotFoundError(ScoringOperationError):
    def __init__(self, game_id: str):
        super().__init__(f"Game not found: {game_id}")
        self.game_id = game_id


class GameClosedError(ScoringOperationError):
    def __init__(self, game_id: str):
        super().__init__(f"Game is not open for play: {game_id}")
        self.game_id = game_id


class StorageError(ScoringOperationError):
    """A stored file could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
