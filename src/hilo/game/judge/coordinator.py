"""Judging coordinator: resolves a free-text answer to a rank, then scores it.

Resolution runs in two tiers:
- Fast path: exact normalized match against the stored answer list.
- Slow path: the answer classifier decides reject / equivalent / new. New
  answers are cached in the answer list before scoring so later players
  take the fast path.

Every classifier problem (error, timeout, unreadable reply) resolves to a
miss. The scoring operation is called in every branch and is the only
component that computes or persists a score.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from hilo.config import JudgeConfig, ObservabilityConfig
from hilo.game.domain.entities import Game, RankedAnswer, RoundResult
from hilo.game.domain.errors import (
    ClassifierParseError,
    DuplicateAnswerError,
    ScoringOperationError,
)
from hilo.game.judge.classifier import AnswerClassifier
from hilo.game.judge.parser import (
    PARSE_ERROR_REASON,
    JudgeRequest,
    JudgeResponse,
    clamp_rank,
)
from hilo.game.normalize import find_exact_match, normalize_answer
from hilo.game.scoring import round_direction

if TYPE_CHECKING:
    from hilo.game.scoring_operation import ScoringOperation
    from hilo.game.storage.game_store import GameStore

logger = logging.getLogger(__name__)

GAME_EVENT_FAST_PATH = "answer_fast_path"
GAME_EVENT_REJECTED = "answer_rejected"
GAME_EVENT_EQUIVALENT = "answer_equivalent"
GAME_EVENT_CACHED = "answer_cached"
GAME_EVENT_CLASSIFIER_FAILURE = "classifier_failure"


class JudgeOutcome(str, Enum):
    FAST_PATH = "fast_path"
    REJECTED = "rejected"
    EQUIVALENT = "equivalent"
    NEW_ANSWER = "new_answer"
    CLASSIFIER_FAILURE = "classifier_failure"


@dataclass
class Resolution:
    outcome: JudgeOutcome
    rank: Optional[int] = None
    matched_answer: Optional[str] = None
    reason: str = ""

    @property
    def on_list(self) -> bool:
        return self.outcome in (
            JudgeOutcome.FAST_PATH,
            JudgeOutcome.EQUIVALENT,
            JudgeOutcome.NEW_ANSWER,
        )


def log_game_event(
    event_type: str,
    game_id: str,
    answer: str,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    event_data = {
        "event_type": event_type,
        "game_id": game_id,
        "answer": answer,
        "timestamp": datetime.now().isoformat(),
        **(details or {}),
    }
    logger.info("GAME_EVENT: %s", event_data)


class JudgingCoordinator:
    def __init__(
        self,
        classifier: AnswerClassifier,
        game_store: GameStore,
        scoring_operation: ScoringOperation,
        judge_config: Optional[JudgeConfig] = None,
        observability_config: Optional[ObservabilityConfig] = None,
    ):
        self._classifier = classifier
        self._game_store = game_store
        self._scoring_operation = scoring_operation
        self._config = judge_config or JudgeConfig()
        self._observability = observability_config or ObservabilityConfig()

    async def judge(
        self,
        game: Game,
        player_id: str,
        round_number: int,
        raw_answer: str,
    ) -> RoundResult:
        round_direction(round_number)
        normalized = normalize_answer(raw_answer)

        resolution = await self.resolve(game, normalized)

        if resolution.outcome == JudgeOutcome.NEW_ANSWER:
            self._cache_answer(game, normalized, resolution)

        if not resolution.on_list:
            return await self._scoring_operation.submit(
                game.id, player_id, round_number, normalized, force_miss=True
            )

        resolve_as = (
            resolution.matched_answer
            if resolution.outcome == JudgeOutcome.EQUIVALENT
            else None
        )
        return await self._scoring_operation.submit(
            game.id, player_id, round_number, normalized, resolve_as=resolve_as
        )

    async def resolve(self, game: Game, normalized: str) -> Resolution:
        if not normalized:
            return Resolution(JudgeOutcome.REJECTED, reason="empty answer")

        answers = self._game_store.get_answers(game.id)

        match = find_exact_match(normalized, answers)
        if match is not None:
            self._emit(GAME_EVENT_FAST_PATH, game, normalized, {"rank": match.rank})
            return Resolution(
                JudgeOutcome.FAST_PATH,
                rank=match.rank,
                matched_answer=match.answer,
                reason="exact match",
            )

        request = JudgeRequest(
            question=game.core_question,
            submitted_answer=normalized,
            known_answers=[a.as_game_answer() for a in answers],
            answer_count_target=game.answer_count,
        )

        try:
            judgment = await asyncio.wait_for(
                self._classifier.judge(request),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Classifier timed out after %.1fs for %r", self._config.timeout_seconds, normalized
            )
            return self._classifier_failure(game, normalized, "timeout")
        except ClassifierParseError:
            return self._classifier_failure(game, normalized, PARSE_ERROR_REASON)
        except Exception as e:
            logger.error("Classifier call failed for %r: %s", normalized, e)
            return self._classifier_failure(game, normalized, str(e))

        return self._interpret(game, normalized, judgment, answers)

    def _interpret(
        self,
        game: Game,
        normalized: str,
        judgment: JudgeResponse,
        answers: List[RankedAnswer],
    ) -> Resolution:
        if not judgment.valid and judgment.reason == PARSE_ERROR_REASON:
            return self._classifier_failure(game, normalized, PARSE_ERROR_REASON)

        if not judgment.valid:
            self._emit(GAME_EVENT_REJECTED, game, normalized, {"reason": judgment.reason})
            return Resolution(JudgeOutcome.REJECTED, reason=judgment.reason)

        if not judgment.is_new_answer:
            target = find_exact_match(normalize_answer(judgment.matched_to or ""), answers)
            if target is not None:
                self._emit(
                    GAME_EVENT_EQUIVALENT,
                    game,
                    normalized,
                    {"matched_to": target.answer, "rank": target.rank, "reason": judgment.reason},
                )
                return Resolution(
                    JudgeOutcome.EQUIVALENT,
                    rank=target.rank,
                    matched_answer=target.answer,
                    reason=judgment.reason,
                )
            logger.info(
                "Classifier matched %r to unknown answer %r; treating as new",
                normalized,
                judgment.matched_to,
            )

        if judgment.rank is None:
            self._emit(GAME_EVENT_REJECTED, game, normalized, {"reason": "no rank"})
            return Resolution(JudgeOutcome.REJECTED, reason="valid without rank")

        rank = clamp_rank(judgment.rank, self._config.max_ai_rank)
        if rank != judgment.rank:
            logger.warning(
                "Clamped classifier rank %s to %s for %r", judgment.rank, rank, normalized
            )
        return Resolution(JudgeOutcome.NEW_ANSWER, rank=rank, reason=judgment.reason)

    def _cache_answer(self, game: Game, normalized: str, resolution: Resolution) -> None:
        entry = RankedAnswer(answer=normalized, rank=resolution.rank, is_ai_judged=True)
        try:
            self._game_store.insert_answer(game.id, entry)
        except DuplicateAnswerError:
            logger.info("Answer %r already cached for game %s; keeping existing entry", normalized, game.id)
            return
        except OSError as e:
            raise ScoringOperationError(f"Failed to record judged answer: {e}") from e

        self._emit(GAME_EVENT_CACHED, game, normalized, {"rank": resolution.rank})

    def _classifier_failure(self, game: Game, normalized: str, reason: str) -> Resolution:
        self._emit(GAME_EVENT_CLASSIFIER_FAILURE, game, normalized, {"reason": reason})
        return Resolution(JudgeOutcome.CLASSIFIER_FAILURE, reason=reason)

    def _emit(
        self,
        event_type: str,
        game: Game,
        normalized: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        if self._observability.log_game_events:
            log_game_event(event_type, game.id, normalized, details)
