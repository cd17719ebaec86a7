"""Hi-Lo Engine: wires configuration, model providers, stores and the judge."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from hilo.config import AgentsConfig, ConfigLoader, GameConfig, ModelsConfig
from hilo.game.domain.entities import (
    Devotional,
    Game,
    GameAnswer,
    GameStatus,
    LeaderboardEntry,
    RankedAnswer,
)
from hilo.game.generator import GameGenerator
from hilo.game.judge.classifier import AnswerClassifier, LLMAnswerClassifier
from hilo.game.judge.coordinator import JudgingCoordinator
from hilo.game.scoring_operation import LocalScoringOperation, ScoringOperation
from hilo.game.session_runner import GameSessionRunner
from hilo.game.storage import GameStore, SubmissionStore
from hilo.game.validator import validate_answers
from hilo.models import ModelProviderRegistry

logger = logging.getLogger(__name__)

DEFAULT_PLAY_WINDOW = timedelta(days=7)


class HiLoEngine:
    def __init__(
        self,
        config_dir: Optional[Path] = None,
        base_dir: Optional[Path] = None,
        classifier: Optional[AnswerClassifier] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._config_loader = ConfigLoader(config_dir)
        self._game_config: GameConfig = self._config_loader.load_game_config()
        self._models_config: ModelsConfig = self._config_loader.load_models_config()
        self._agents_config: AgentsConfig = self._config_loader.load_agents_config()

        if base_dir is None:
            base_dir = Path(__file__).parent.parent.parent.parent

        self._base_dir = base_dir
        self._clock = clock or datetime.now
        self._model_registry = ModelProviderRegistry(self._models_config)
        self._game_store = GameStore(config=self._game_config, base_dir=base_dir)
        self._submission_store = SubmissionStore(config=self._game_config, base_dir=base_dir)
        self._scoring_operation = LocalScoringOperation(
            game_store=self._game_store,
            submission_store=self._submission_store,
            config=self._game_config,
            clock=self._clock,
        )

        if classifier is None:
            judge_config = self._agents_config.judge
            classifier = LLMAnswerClassifier(
                self._model_registry.get_llm_client(
                    temperature=judge_config.temperature,
                    max_tokens=judge_config.max_tokens,
                ),
                judge_config,
            )

        self._coordinator = JudgingCoordinator(
            classifier=classifier,
            game_store=self._game_store,
            scoring_operation=self._scoring_operation,
            judge_config=self._agents_config.judge,
            observability_config=self._agents_config.observability,
        )
        self._generator: Optional[GameGenerator] = None

        logger.info("HiLoEngine initialized with base_dir=%s", base_dir)

    @property
    def game_config(self) -> GameConfig:
        return self._game_config

    @property
    def models_config(self) -> ModelsConfig:
        return self._models_config

    @property
    def agents_config(self) -> AgentsConfig:
        return self._agents_config

    @property
    def model_registry(self) -> ModelProviderRegistry:
        return self._model_registry

    @property
    def game_store(self) -> GameStore:
        return self._game_store

    @property
    def submission_store(self) -> SubmissionStore:
        return self._submission_store

    @property
    def scoring_operation(self) -> ScoringOperation:
        return self._scoring_operation

    @property
    def coordinator(self) -> JudgingCoordinator:
        return self._coordinator

    @property
    def generator(self) -> GameGenerator:
        if self._generator is None:
            generation = self._game_config.generation
            self._generator = GameGenerator(
                llm_client=self._model_registry.get_llm_client(
                    temperature=generation.temperature,
                    max_tokens=generation.max_tokens,
                ),
                game_store=self._game_store,
                game_config=self._game_config,
            )
        return self._generator

    def list_games(self, status_filter: Optional[GameStatus] = None) -> List[Game]:
        return self._game_store.list_games(status_filter)

    def get_game(self, game_id: str) -> Game:
        return self._game_store.load_game(game_id)

    def create_game(
        self,
        core_question: str = "",
        answers: Optional[Sequence[GameAnswer]] = None,
    ) -> Game:
        if answers:
            generation = self._game_config.generation
            validate_answers(
                answers,
                min_answers=generation.min_answers,
                max_answers=generation.max_answers,
                max_rank=generation.max_rank,
            )

        game = self._game_store.create_game(
            core_question=core_question,
            status=GameStatus.READY if answers else GameStatus.GENERATING,
        )
        if answers:
            self._game_store.seed_answers(game.id, answers)
            game = self._game_store.load_game(game.id)
        return game

    async def generate_game(self, game_id: str, devotional: Devotional) -> Game:
        return await self.generator.generate(game_id, devotional)

    def activate_game(
        self,
        game_id: str,
        opens_at: Optional[datetime] = None,
        closes_at: Optional[datetime] = None,
        window: timedelta = DEFAULT_PLAY_WINDOW,
    ) -> Game:
        opens_at = opens_at or self._clock()
        closes_at = closes_at or opens_at + window
        return self._game_store.set_status(
            game_id, GameStatus.ACTIVE, opens_at=opens_at, closes_at=closes_at
        )

    def get_answers(self, game_id: str) -> List[RankedAnswer]:
        return self._game_store.get_answers(game_id)

    def leaderboard(self, game_id: str, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        self._game_store.load_game(game_id)
        return self._submission_store.leaderboard(game_id, limit=limit)

    def create_runner(self, game_id: str, player_id: str) -> GameSessionRunner:
        return GameSessionRunner(
            game=self._game_store.load_game(game_id),
            player_id=player_id,
            coordinator=self._coordinator,
            submission_store=self._submission_store,
            game_store=self._game_store,
            clock=self._clock,
        )
