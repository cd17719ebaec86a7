"""Game Session Runner: drives one player's state machine against the judge."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, TYPE_CHECKING

from hilo.game.domain.entities import Game, GameStatus, LeaderboardEntry
from hilo.game.domain.errors import ScoringOperationError
from hilo.game.state_machine import (
    AnswerResult,
    AuthRestored,
    AuthSuccess,
    BackToResults,
    ClearError,
    GameEvent,
    GameExpired,
    GameLoaded,
    GameScreen,
    GameState,
    NextRound,
    ResumeSession,
    RoundData,
    SetError,
    StartGame,
    SubmitAnswer,
    ViewLeaderboard,
    initial_state,
    reduce,
)
from hilo.game.storage.submission_store import SubmissionStore

if TYPE_CHECKING:
    from hilo.game.judge.coordinator import JudgingCoordinator
    from hilo.game.storage.game_store import GameStore

logger = logging.getLogger(__name__)

# Game event logger for player-flow visibility
game_logger = logging.getLogger("hilo.session")


class GameSessionRunner:
    def __init__(
        self,
        game: Game,
        player_id: str,
        coordinator: JudgingCoordinator,
        submission_store: SubmissionStore,
        game_store: Optional[GameStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._game = game
        self._player_id = player_id
        self._coordinator = coordinator
        self._submission_store = submission_store
        self._game_store = game_store
        self._clock = clock or datetime.now
        self._state = initial_state()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def game(self) -> Game:
        return self._game

    @property
    def player_id(self) -> str:
        return self._player_id

    @property
    def screen(self) -> GameScreen:
        return self._state.screen

    def dispatch(self, event: GameEvent) -> GameState:
        previous = self._state
        self._state = reduce(previous, event)

        if self._state is previous:
            logger.debug(
                "Ignored %s on screen %s", type(event).__name__, previous.screen.value
            )
        elif self._state.screen != previous.screen:
            game_logger.info(
                "[%s/%s] %s: %s -> %s",
                self._game.id,
                self._player_id,
                type(event).__name__,
                previous.screen.value,
                self._state.screen.value,
            )
        return self._state

    def _loaded_status(self) -> GameStatus:
        now = self._clock()
        if self._game.is_open(now):
            return GameStatus.ACTIVE
        status = self._game.effective_status(now)
        # Active but outside its window (not yet opened) is not playable either.
        return GameStatus.EXPIRED if status == GameStatus.ACTIVE else status

    def load(self) -> GameState:
        return self.dispatch(GameLoaded(status=self._loaded_status().value))

    def start(self) -> GameState:
        return self.dispatch(StartGame())

    def authenticate(
        self,
        profile_id: str,
        first_name: str = "",
        restored: bool = False,
    ) -> GameState:
        self._player_id = profile_id
        self._remember_first_name(first_name)

        if restored:
            return self.dispatch(AuthRestored(profile_id=profile_id, first_name=first_name))
        return self.dispatch(AuthSuccess(profile_id=profile_id, first_name=first_name))

    def _remember_first_name(self, first_name: str) -> None:
        if not first_name:
            return
        session = self._submission_store.get_or_create_session(
            self._game.id, self._player_id, first_name
        )
        if session.first_name != first_name:
            session.first_name = first_name
            self._submission_store.save_session(session)

    def resume(self) -> GameState:
        """Restore persisted rounds for this player, if any."""
        session = self._submission_store.get_session(self._game.id, self._player_id)
        if session is None or not session.rounds:
            return self._state

        answers = []
        if self._game_store is not None:
            answers = [a.as_game_answer() for a in self._game_store.get_answers(self._game.id)]

        completed = [RoundData.from_submission(s, answers) for s in session.rounds]
        logger.info(
            "Resuming session %s for player %s at round %d",
            session.session_id,
            self._player_id,
            len(completed) + 1,
        )
        return self.dispatch(
            ResumeSession(
                session_id=session.session_id,
                completed_rounds=completed,
                total_score=session.total_score,
            )
        )

    async def submit_answer(self, text: str) -> GameState:
        before = self._state
        self.dispatch(SubmitAnswer(answer=text))
        if self._state is before:
            return self._state

        if not self._game.is_open(self._clock()):
            return self.dispatch(GameExpired())

        try:
            result = await self._coordinator.judge(
                self._game,
                self._player_id,
                self._state.current_round,
                text,
            )
        except ScoringOperationError as e:
            logger.error("Scoring failed for player %s: %s", self._player_id, e)
            return self.dispatch(SetError(error=str(e)))

        return self.dispatch(AnswerResult(result=result))

    def next_round(self) -> GameState:
        return self.dispatch(NextRound())

    def view_leaderboard(self) -> GameState:
        return self.dispatch(ViewLeaderboard())

    def back_to_results(self) -> GameState:
        return self.dispatch(BackToResults())

    def clear_error(self) -> GameState:
        return self.dispatch(ClearError())

    def leaderboard(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        return self._submission_store.leaderboard(self._game.id, limit=limit)
