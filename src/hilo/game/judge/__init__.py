"""Answer judging: classifier contract and the two-tier coordinator."""

from hilo.game.judge.classifier import AnswerClassifier, LLMAnswerClassifier
from hilo.game.judge.coordinator import (
    JudgeOutcome,
    JudgingCoordinator,
    Resolution,
    log_game_event,
)
from hilo.game.judge.parser import (
    JudgeRequest,
    JudgeResponse,
    clamp_rank,
    parse_judgment,
    strip_code_fence,
)

__all__ = [
    "AnswerClassifier",
    "LLMAnswerClassifier",
    "JudgeOutcome",
    "JudgingCoordinator",
    "Resolution",
    "log_game_event",
    "JudgeRequest",
    "JudgeResponse",
    "clamp_rank",
    "parse_judgment",
    "strip_code_fence",
]
