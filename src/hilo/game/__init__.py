"""Game module for judging, scoring and the player flow."""

from hilo.game.normalize import find_exact_match, normalize_answer
from hilo.game.scoring import (
    max_total_score,
    round_direction,
    round_max_score,
    round_score,
    scoring_rank,
    stored_rank_score,
    total_score,
)
from hilo.game.validator import parse_generated_game, validate_answers
from hilo.game.domain import (
    Devotional,
    Game,
    GameAnswer,
    GameStatus,
    LeaderboardEntry,
    PlayerSession,
    RankedAnswer,
    RoundDirection,
    RoundResult,
    RoundSubmission,
)
from hilo.game.state_machine import GameScreen, GameState, initial_state, reduce
from hilo.game.judge import AnswerClassifier, JudgingCoordinator, LLMAnswerClassifier
from hilo.game.storage import GameStore, SubmissionStore
from hilo.game.scoring_operation import LocalScoringOperation, ScoringOperation
from hilo.game.generator import GameGenerator
from hilo.game.session_runner import GameSessionRunner
from hilo.game.engine import HiLoEngine

__all__ = [
    "find_exact_match",
    "normalize_answer",
    "max_total_score",
    "round_direction",
    "round_max_score",
    "round_score",
    "scoring_rank",
    "stored_rank_score",
    "total_score",
    "parse_generated_game",
    "validate_answers",
    "Devotional",
    "Game",
    "GameAnswer",
    "GameStatus",
    "LeaderboardEntry",
    "PlayerSession",
    "RankedAnswer",
    "RoundDirection",
    "RoundResult",
    "RoundSubmission",
    "GameScreen",
    "GameState",
    "initial_state",
    "reduce",
    "AnswerClassifier",
    "JudgingCoordinator",
    "LLMAnswerClassifier",
    "GameStore",
    "SubmissionStore",
    "LocalScoringOperation",
    "ScoringOperation",
    "GameGenerator",
    "GameSessionRunner",
    "HiLoEngine",
]
