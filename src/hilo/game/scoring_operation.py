"""Transactional scoring operation.

The operation re-resolves an answer's rank from the stored list, scores the
round, and records the hit. It is idempotent per (player, game, round): a
repeat call for a recorded round returns the stored result and awards
nothing new. Misses are not persisted.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from hilo.config import ConfigLoader, GameConfig
from hilo.game.domain.entities import (
    GameAnswer,
    PlayerSession,
    RankedAnswer,
    RoundResult,
    RoundSubmission,
)
from hilo.game.domain.errors import (
    GameClosedError,
    InvalidArgumentError,
    ScoringOperationError,
)
from hilo.game.normalize import find_exact_match, normalize_answer
from hilo.game.scoring import round_direction, stored_rank_score
from hilo.game.storage.game_store import GameStore
from hilo.game.storage.submission_store import SubmissionStore

logger = logging.getLogger(__name__)


class ScoringOperation(ABC):
    @abstractmethod
    async def submit(
        self,
        game_id: str,
        player_id: str,
        round_number: int,
        answer: str,
        *,
        resolve_as: Optional[str] = None,
        force_miss: bool = False,
    ) -> RoundResult:
        """Score one round.

        ``answer`` is the player's normalized answer and is what gets recorded.
        ``resolve_as`` names the stored entry to resolve the rank against when
        it differs from ``answer`` (an equivalent match). ``force_miss`` skips
        resolution entirely.
        """


class LocalScoringOperation(ScoringOperation):
    def __init__(
        self,
        game_store: GameStore,
        submission_store: SubmissionStore,
        config: Optional[GameConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if config is None:
            config = ConfigLoader().load_game_config()

        self._game_store = game_store
        self._submission_store = submission_store
        self._config = config
        self._clock = clock or datetime.now

    async def submit(
        self,
        game_id: str,
        player_id: str,
        round_number: int,
        answer: str,
        *,
        resolve_as: Optional[str] = None,
        force_miss: bool = False,
    ) -> RoundResult:
        direction = round_direction(round_number)
        normalized = normalize_answer(answer)

        with self._game_store.lock:
            game = self._game_store.load_game(game_id)
            if not game.is_open(self._clock()):
                raise GameClosedError(game_id)

            try:
                session = self._submission_store.get_or_create_session(game_id, player_id)
                answers = self._game_store.get_answers(game_id)
            except OSError as e:
                raise ScoringOperationError(f"Failed to load game state: {e}") from e

            existing = session.get_round(round_number)
            if existing is not None:
                logger.info(
                    "Round %d already recorded for player %s in game %s",
                    round_number,
                    player_id,
                    game_id,
                )
                return self._result(session, existing, answers)

            if round_number != session.next_round_number:
                raise InvalidArgumentError(
                    f"Round {round_number} is not the next round "
                    f"(expected {session.next_round_number})"
                )

            entry = None
            if not force_miss:
                entry = find_exact_match(normalize_answer(resolve_as or normalized), answers)

            if entry is None:
                return RoundResult(
                    session_id=session.session_id,
                    round_number=round_number,
                    submitted_answer=normalized,
                    on_list=False,
                    rank=None,
                    round_score=0,
                    total_score=session.total_score,
                    direction=direction,
                )

            score = stored_rank_score(
                round_number, entry.rank, self._config.scoring.rank_ceiling
            )
            submission = RoundSubmission(
                round_number=round_number,
                submitted_answer=normalized,
                on_list=True,
                rank=entry.rank,
                round_score=score,
                total_score=session.total_score + score,
                direction=direction,
            )
            session.record(submission, round_count=self._config.game.round_count)

            try:
                self._submission_store.save_session(session)
            except OSError as e:
                raise ScoringOperationError(f"Failed to record round: {e}") from e

        logger.info(
            "Scored round %d for player %s in game %s: %r rank %d -> %d (total %d)",
            round_number,
            player_id,
            game_id,
            normalized,
            entry.rank,
            score,
            session.total_score,
        )
        return self._result(session, submission, answers)

    def _result(
        self,
        session: PlayerSession,
        submission: RoundSubmission,
        answers: List[RankedAnswer],
    ) -> RoundResult:
        return RoundResult(
            session_id=session.session_id,
            round_number=submission.round_number,
            submitted_answer=submission.submitted_answer,
            on_list=submission.on_list,
            rank=submission.rank,
            round_score=submission.round_score,
            total_score=submission.total_score,
            direction=submission.direction,
            all_answers=[GameAnswer(answer=a.answer, rank=a.rank) for a in answers],
        )
