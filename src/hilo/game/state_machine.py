"""Hi-Lo player-facing state machine.

A pure reducer over one player's screen flow:

    loading -> intro -> auth -> round_play <-> round_result (x4)
            -> final_results <-> leaderboard
    loading -> expired

Every event is guarded by the screen it may arrive on. An event received on
any other screen returns the same state object unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from hilo.game.domain.entities import (
    GameAnswer,
    GameStatus,
    RoundDirection,
    RoundResult,
    RoundSubmission,
)

FINAL_ROUND = 4


class GameScreen(str, Enum):
    LOADING = "loading"
    INTRO = "intro"
    AUTH = "auth"
    ROUND_PLAY = "round_play"
    ROUND_RESULT = "round_result"
    FINAL_RESULTS = "final_results"
    LEADERBOARD = "leaderboard"
    EXPIRED = "expired"


class RoundData(BaseModel):
    model_config = ConfigDict(frozen=True)

    round_number: int
    submitted_answer: str
    on_list: bool
    rank: Optional[int] = None
    round_score: int
    direction: RoundDirection
    all_answers: List[GameAnswer] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: RoundResult) -> "RoundData":
        return cls(
            round_number=result.round_number,
            submitted_answer=result.submitted_answer,
            on_list=result.on_list,
            rank=result.rank,
            round_score=result.round_score,
            direction=result.direction,
            all_answers=list(result.all_answers),
        )

    @classmethod
    def from_submission(
        cls,
        submission: RoundSubmission,
        all_answers: Optional[List[GameAnswer]] = None,
    ) -> "RoundData":
        return cls(
            round_number=submission.round_number,
            submitted_answer=submission.submitted_answer,
            on_list=submission.on_list,
            rank=submission.rank,
            round_score=submission.round_score,
            direction=submission.direction,
            all_answers=list(all_answers or []),
        )


class GameState(BaseModel):
    model_config = ConfigDict(frozen=True)

    screen: GameScreen = GameScreen.LOADING
    current_round: int = 1
    rounds: List[RoundData] = Field(default_factory=list)
    total_score: int = 0
    authenticated: bool = False
    profile_id: Optional[str] = None
    first_name: str = ""
    session_id: Optional[str] = None
    submitting: bool = False
    last_miss: Optional[str] = None
    error: Optional[str] = None


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class GameLoaded(_Event):
    status: str


class StartGame(_Event):
    pass


class AuthSuccess(_Event):
    profile_id: str
    first_name: str = ""


class AuthRestored(_Event):
    profile_id: str
    first_name: str = ""


class SubmitAnswer(_Event):
    answer: str


class AnswerResult(_Event):
    result: RoundResult


class NextRound(_Event):
    pass


class ViewLeaderboard(_Event):
    pass


class BackToResults(_Event):
    pass


class ResumeSession(_Event):
    session_id: str
    completed_rounds: List[RoundData] = Field(default_factory=list)
    total_score: int = 0


class GameExpired(_Event):
    pass


class SetError(_Event):
    error: str


class ClearError(_Event):
    pass


GameEvent = Union[
    GameLoaded,
    StartGame,
    AuthSuccess,
    AuthRestored,
    SubmitAnswer,
    AnswerResult,
    NextRound,
    ViewLeaderboard,
    BackToResults,
    ResumeSession,
    GameExpired,
    SetError,
    ClearError,
]


def initial_state() -> GameState:
    return GameState()


def _on_game_loaded(state: GameState, event: GameLoaded) -> GameState:
    if state.screen != GameScreen.LOADING:
        return state
    active = event.status == GameStatus.ACTIVE.value
    return state.model_copy(
        update={"screen": GameScreen.INTRO if active else GameScreen.EXPIRED}
    )


def _on_start_game(state: GameState, event: StartGame) -> GameState:
    if state.screen != GameScreen.INTRO:
        return state
    screen = GameScreen.ROUND_PLAY if state.authenticated else GameScreen.AUTH
    return state.model_copy(update={"screen": screen})


def _on_auth_success(state: GameState, event: AuthSuccess) -> GameState:
    if state.screen != GameScreen.AUTH:
        return state
    return state.model_copy(
        update={
            "screen": GameScreen.ROUND_PLAY,
            "authenticated": True,
            "profile_id": event.profile_id,
            "first_name": event.first_name,
        }
    )


def _on_auth_restored(state: GameState, event: AuthRestored) -> GameState:
    return state.model_copy(
        update={
            "authenticated": True,
            "profile_id": event.profile_id,
            "first_name": event.first_name,
        }
    )


def _on_submit_answer(state: GameState, event: SubmitAnswer) -> GameState:
    if state.screen != GameScreen.ROUND_PLAY:
        return state
    return state.model_copy(update={"submitting": True, "error": None, "last_miss": None})


def _on_answer_result(state: GameState, event: AnswerResult) -> GameState:
    if state.screen != GameScreen.ROUND_PLAY:
        return state

    result = event.result
    if not result.on_list:
        return state.model_copy(
            update={"submitting": False, "last_miss": result.submitted_answer}
        )

    return state.model_copy(
        update={
            "screen": GameScreen.ROUND_RESULT,
            "submitting": False,
            "last_miss": None,
            "rounds": [*state.rounds, RoundData.from_result(result)],
            "total_score": result.total_score,
            "session_id": result.session_id,
        }
    )


def _on_next_round(state: GameState, event: NextRound) -> GameState:
    if state.screen != GameScreen.ROUND_RESULT:
        return state
    if state.current_round >= FINAL_ROUND:
        return state.model_copy(update={"screen": GameScreen.FINAL_RESULTS})
    return state.model_copy(
        update={"screen": GameScreen.ROUND_PLAY, "current_round": state.current_round + 1}
    )


def _on_view_leaderboard(state: GameState, event: ViewLeaderboard) -> GameState:
    if state.screen not in (GameScreen.FINAL_RESULTS, GameScreen.EXPIRED):
        return state
    return state.model_copy(update={"screen": GameScreen.LEADERBOARD})


def _on_back_to_results(state: GameState, event: BackToResults) -> GameState:
    if state.screen != GameScreen.LEADERBOARD:
        return state
    return state.model_copy(update={"screen": GameScreen.FINAL_RESULTS})


def _on_resume_session(state: GameState, event: ResumeSession) -> GameState:
    completed = len(event.completed_rounds)
    all_done = completed >= FINAL_ROUND
    return state.model_copy(
        update={
            "session_id": event.session_id,
            "rounds": list(event.completed_rounds),
            "total_score": event.total_score,
            "current_round": FINAL_ROUND if all_done else completed + 1,
            "screen": GameScreen.FINAL_RESULTS if all_done else GameScreen.ROUND_PLAY,
        }
    )


def _on_game_expired(state: GameState, event: GameExpired) -> GameState:
    return state.model_copy(update={"screen": GameScreen.EXPIRED})


def _on_set_error(state: GameState, event: SetError) -> GameState:
    return state.model_copy(update={"error": event.error, "submitting": False})


def _on_clear_error(state: GameState, event: ClearError) -> GameState:
    return state.model_copy(update={"error": None})


_HANDLERS: Dict[Type[_Event], Callable[[GameState, _Event], GameState]] = {
    GameLoaded: _on_game_loaded,
    StartGame: _on_start_game,
    AuthSuccess: _on_auth_success,
    AuthRestored: _on_auth_restored,
    SubmitAnswer: _on_submit_answer,
    AnswerResult: _on_answer_result,
    NextRound: _on_next_round,
    ViewLeaderboard: _on_view_leaderboard,
    BackToResults: _on_back_to_results,
    ResumeSession: _on_resume_session,
    GameExpired: _on_game_expired,
    SetError: _on_set_error,
    ClearError: _on_clear_error,
}


def reduce(state: GameState, event: GameEvent) -> GameState:
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state
    return handler(state, event)
