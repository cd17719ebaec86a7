"""File-backed storage for games and their ranked answer lists."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from hilo.config import ConfigLoader, GameConfig
from hilo.game.domain.entities import Game, GameAnswer, GameStatus, RankedAnswer
from hilo.game.domain.errors import DuplicateAnswerError, GameNotFoundError, StorageError
from hilo.game.normalize import find_exact_match, normalize_answer
from hilo.game.storage.json_io import read_json, safe_filename, write_json
from hilo.game.validator import validate_answers

logger = logging.getLogger(__name__)


class GameStore:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        base_dir: Optional[Path] = None,
    ):
        if config is None:
            loader = ConfigLoader()
            config = loader.load_game_config()

        self._config = config

        if base_dir is None:
            base_dir = Path(__file__).parent.parent.parent.parent.parent

        self._game_storage_dir = base_dir / config.directories.game_storage_dir
        self._games_dir = self._game_storage_dir / "games"
        self._answers_dir = self._game_storage_dir / "answers"
        self._lock = threading.RLock()

        self._ensure_directories()

    def _ensure_directories(self) -> None:
        self._games_dir.mkdir(parents=True, exist_ok=True)
        self._answers_dir.mkdir(parents=True, exist_ok=True)

    @property
    def storage_dir(self) -> Path:
        return self._game_storage_dir

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _game_file(self, game_id: str) -> Path:
        return self._games_dir / f"{safe_filename(game_id)}.json"

    def _answers_file(self, game_id: str) -> Path:
        return self._answers_dir / f"{safe_filename(game_id)}.json"

    def create_game(
        self,
        core_question: str = "",
        answer_count: Optional[int] = None,
        status: GameStatus = GameStatus.GENERATING,
        opens_at: Optional[datetime] = None,
        closes_at: Optional[datetime] = None,
        game_id: Optional[str] = None,
    ) -> Game:
        game = Game(
            core_question=core_question,
            answer_count=answer_count or self._config.game.default_answer_count,
            status=status,
            opens_at=opens_at,
            closes_at=closes_at,
        )
        if game_id is not None:
            game.id = game_id

        self.save_game(game)
        logger.info("Created game %s (%s)", game.id, status.value)
        return game

    def save_game(self, game: Game) -> None:
        with self._lock:
            write_json(self._game_file(game.id), game.model_dump(mode="json"))
        logger.debug("Saved game %s", game.id)

    def load_game(self, game_id: str) -> Game:
        game_file = self._game_file(game_id)
        if not game_file.exists():
            raise GameNotFoundError(game_id)
        try:
            return Game.model_validate(read_json(game_file))
        except (OSError, ValueError) as e:
            raise StorageError(str(game_file), str(e)) from e

    def game_exists(self, game_id: str) -> bool:
        return self._game_file(game_id).exists()

    def list_games(self, status_filter: Optional[GameStatus] = None) -> List[Game]:
        games = []
        for game_file in self._games_dir.glob("*.json"):
            try:
                game = Game.model_validate(read_json(game_file))
            except Exception as exc:
                logger.error("Failed to load game %s: %s", game_file.stem, exc)
                continue
            if status_filter and game.status != status_filter:
                continue
            games.append(game)

        return sorted(games, key=lambda g: g.created_at, reverse=True)

    def set_status(
        self,
        game_id: str,
        status: GameStatus,
        opens_at: Optional[datetime] = None,
        closes_at: Optional[datetime] = None,
    ) -> Game:
        with self._lock:
            game = self.load_game(game_id)
            game.status = status
            if opens_at is not None:
                game.opens_at = opens_at
            if closes_at is not None:
                game.closes_at = closes_at
            game.updated_at = datetime.now()
            self.save_game(game)

        logger.info("Game %s status -> %s", game_id, status.value)
        return game

    def get_answers(self, game_id: str) -> List[RankedAnswer]:
        answers_file = self._answers_file(game_id)
        if not answers_file.exists():
            return []
        try:
            answers = [RankedAnswer.model_validate(a) for a in read_json(answers_file)]
        except (OSError, ValueError) as e:
            raise StorageError(str(answers_file), str(e)) from e
        return sorted(answers, key=lambda a: a.rank)

    def _write_answers(self, game_id: str, answers: Sequence[RankedAnswer]) -> None:
        write_json(self._answers_file(game_id), [a.model_dump(mode="json") for a in answers])

    def insert_answer(self, game_id: str, entry: RankedAnswer) -> RankedAnswer:
        """Insert keyed on normalized text; an existing key raises DuplicateAnswerError."""
        normalized = normalize_answer(entry.answer)
        stored = RankedAnswer(answer=normalized, rank=entry.rank, is_ai_judged=entry.is_ai_judged)

        with self._lock:
            answers = self.get_answers(game_id)
            if find_exact_match(normalized, answers) is not None:
                raise DuplicateAnswerError(game_id, normalized)
            answers.append(stored)
            self._write_answers(game_id, answers)

        logger.debug("Inserted answer %r (rank %d) for game %s", normalized, stored.rank, game_id)
        return stored

    def seed_answers(self, game_id: str, answers: Sequence[GameAnswer]) -> List[RankedAnswer]:
        generation = self._config.generation
        validate_answers(
            answers,
            min_answers=generation.min_answers,
            max_answers=generation.max_answers,
            max_rank=generation.max_rank,
        )

        seeded = [
            RankedAnswer(answer=normalize_answer(a.answer), rank=a.rank, is_ai_judged=False)
            for a in answers
        ]

        with self._lock:
            game = self.load_game(game_id)
            self._write_answers(game_id, seeded)
            game.answer_count = len(seeded)
            game.updated_at = datetime.now()
            self.save_game(game)

        logger.info("Seeded %d answers for game %s", len(seeded), game_id)
        return sorted(seeded, key=lambda a: a.rank)
