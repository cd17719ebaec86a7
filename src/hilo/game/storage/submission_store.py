"""File-backed storage for player sessions and the per-game leaderboard."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from hilo.config import ConfigLoader, GameConfig
from hilo.game.domain.entities import LeaderboardEntry, PlayerSession
from hilo.game.domain.errors import StorageError
from hilo.game.storage.json_io import read_json, safe_filename, write_json

logger = logging.getLogger(__name__)


class SubmissionStore:
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
        self._sessions_dir = self._game_storage_dir / "sessions"
        self._sessions_dir.mkdir(parents=True, exist_ok=True)

    @property
    def sessions_dir(self) -> Path:
        return self._sessions_dir

    def _game_dir(self, game_id: str) -> Path:
        return self._sessions_dir / safe_filename(game_id)

    def _session_file(self, game_id: str, player_id: str) -> Path:
        return self._game_dir(game_id) / f"{safe_filename(player_id)}.json"

    def get_session(self, game_id: str, player_id: str) -> Optional[PlayerSession]:
        session_file = self._session_file(game_id, player_id)
        if not session_file.exists():
            return None
        try:
            return PlayerSession.model_validate(read_json(session_file))
        except (OSError, ValueError) as e:
            raise StorageError(str(session_file), str(e)) from e

    def get_or_create_session(
        self,
        game_id: str,
        player_id: str,
        first_name: str = "",
    ) -> PlayerSession:
        session = self.get_session(game_id, player_id)
        if session is not None:
            return session

        session = PlayerSession(game_id=game_id, player_id=player_id, first_name=first_name)
        self.save_session(session)
        logger.info("Created session %s for player %s in game %s", session.session_id, player_id, game_id)
        return session

    def save_session(self, session: PlayerSession) -> None:
        write_json(
            self._session_file(session.game_id, session.player_id),
            session.model_dump(mode="json"),
        )
        logger.debug("Saved session %s", session.session_id)

    def list_sessions(self, game_id: str) -> List[PlayerSession]:
        game_dir = self._game_dir(game_id)
        if not game_dir.exists():
            return []

        sessions = []
        for session_file in game_dir.glob("*.json"):
            try:
                sessions.append(PlayerSession.model_validate(read_json(session_file)))
            except Exception as exc:
                logger.error("Failed to load session %s: %s", session_file, exc)

        return sessions

    def leaderboard(self, game_id: str, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        """Players with at least one scored round, best first.

        Completed games rank ahead of unfinished ones at the same score, and
        earlier completion wins a tie. Equal scores share a rank (1, 1, 3).
        """
        sessions = [s for s in self.list_sessions(game_id) if s.rounds]
        sessions.sort(
            key=lambda s: (
                -s.total_score,
                s.completed_at is None,
                s.completed_at or datetime.max,
            )
        )

        entries: List[LeaderboardEntry] = []
        for position, session in enumerate(sessions, start=1):
            if entries and entries[-1].total_score == session.total_score:
                player_rank = entries[-1].player_rank
            else:
                player_rank = position
            entries.append(
                LeaderboardEntry(
                    player_id=session.player_id,
                    first_name=session.first_name,
                    total_score=session.total_score,
                    completed_at=session.completed_at,
                    player_rank=player_rank,
                )
            )

        return entries[:limit] if limit is not None else entries
