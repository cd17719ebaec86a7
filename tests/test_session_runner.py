"""Tests for GameSessionRunner."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from hilo.config.models import JudgeConfig, ObservabilityConfig
from hilo.game.domain.entities import GameStatus
from hilo.game.domain.errors import ScoringOperationError
from hilo.game.judge.coordinator import JudgingCoordinator
from hilo.game.judge.parser import JudgeResponse
from hilo.game.scoring_operation import LocalScoringOperation
from hilo.game.session_runner import GameSessionRunner
from hilo.game.state_machine import GameScreen

from conftest import NOW


@pytest.fixture
def classifier():
    mock = MagicMock()
    mock.judge = AsyncMock(return_value=JudgeResponse(valid=False, reason="off topic"))
    return mock


@pytest.fixture
def coordinator(classifier, game_store, submission_store, game_config, clock):
    operation = LocalScoringOperation(game_store, submission_store, config=game_config, clock=clock)
    return JudgingCoordinator(
        classifier=classifier,
        game_store=game_store,
        scoring_operation=operation,
        judge_config=JudgeConfig(),
        observability_config=ObservabilityConfig(log_game_events=False),
    )


@pytest.fixture
def make_runner(coordinator, submission_store, game_store, clock):
    def factory(game, player_id="player-1", runner_clock=None):
        return GameSessionRunner(
            game=game,
            player_id=player_id,
            coordinator=coordinator,
            submission_store=submission_store,
            game_store=game_store,
            clock=runner_clock or clock,
        )

    return factory


def play_to_round(runner, first_name="Sam"):
    runner.load()
    runner.start()
    runner.authenticate(runner.player_id, first_name)
    runner.resume()


class TestLoad:
    def test_active_game_goes_to_intro(self, make_runner, active_game):
        runner = make_runner(active_game)
        assert runner.load().screen == GameScreen.INTRO

    def test_closed_game_goes_to_expired(self, make_runner, active_game):
        runner = make_runner(active_game, runner_clock=lambda: NOW + timedelta(days=2))
        assert runner.load().screen == GameScreen.EXPIRED

    def test_not_yet_open_goes_to_expired(self, make_runner, active_game):
        runner = make_runner(active_game, runner_clock=lambda: NOW - timedelta(days=1))
        assert runner.load().screen == GameScreen.EXPIRED

    def test_ready_game_goes_to_expired(self, make_runner, game_store):
        game = game_store.create_game(status=GameStatus.READY)
        assert make_runner(game).load().screen == GameScreen.EXPIRED


class TestPlay:
    @pytest.mark.asyncio
    async def test_hit_then_next_round(self, make_runner, active_game):
        runner = make_runner(active_game)
        play_to_round(runner)
        assert runner.screen == GameScreen.ROUND_PLAY

        state = await runner.submit_answer(" Prays ")
        assert state.screen == GameScreen.ROUND_RESULT
        assert state.total_score == 196

        state = runner.next_round()
        assert state.screen == GameScreen.ROUND_PLAY
        assert state.current_round == 2

    @pytest.mark.asyncio
    async def test_miss_stays_on_round(self, make_runner, active_game, classifier):
        runner = make_runner(active_game)
        play_to_round(runner)

        state = await runner.submit_answer("Pizza")

        assert state.screen == GameScreen.ROUND_PLAY
        assert state.last_miss == "pizza"
        assert state.submitting is False
        classifier.judge.assert_called_once()

    @pytest.mark.asyncio
    async def test_full_game_and_leaderboard(self, make_runner, active_game):
        runner = make_runner(active_game)
        play_to_round(runner)

        for answer in ["love", "faith", "worship", "meekness"]:
            state = await runner.submit_answer(answer)
            assert state.screen == GameScreen.ROUND_RESULT
            runner.next_round()

        assert runner.screen == GameScreen.FINAL_RESULTS
        assert runner.state.total_score == 200 + 398 + 600 + 800

        assert runner.view_leaderboard().screen == GameScreen.LEADERBOARD
        board = runner.leaderboard()
        assert board[0].player_id == "player-1"
        assert board[0].first_name == "Sam"
        assert runner.back_to_results().screen == GameScreen.FINAL_RESULTS

    @pytest.mark.asyncio
    async def test_submit_outside_round_is_ignored(self, make_runner, active_game, classifier):
        runner = make_runner(active_game)
        runner.load()

        state = await runner.submit_answer("love")

        assert state.screen == GameScreen.INTRO
        classifier.judge.assert_not_called()

    @pytest.mark.asyncio
    async def test_window_closing_mid_game_expires(self, make_runner, active_game):
        now = [NOW]
        runner = make_runner(active_game, runner_clock=lambda: now[0])
        play_to_round(runner)

        now[0] = NOW + timedelta(days=2)
        state = await runner.submit_answer("love")

        assert state.screen == GameScreen.EXPIRED

    @pytest.mark.asyncio
    async def test_scoring_error_routes_through_set_error(self, make_runner, active_game, coordinator):
        runner = make_runner(active_game)
        play_to_round(runner)
        coordinator.judge = AsyncMock(side_effect=ScoringOperationError("database unavailable"))

        state = await runner.submit_answer("love")

        assert state.screen == GameScreen.ROUND_PLAY
        assert state.error == "database unavailable"
        assert state.submitting is False
        assert runner.clear_error().error is None

    @pytest.mark.asyncio
    async def test_corrupt_answer_list_routes_through_set_error(
        self, make_runner, active_game, game_store
    ):
        runner = make_runner(active_game)
        play_to_round(runner)
        (game_store.storage_dir / "answers" / f"{active_game.id}.json").write_text("{not json")

        state = await runner.submit_answer("love")

        assert state.screen == GameScreen.ROUND_PLAY
        assert state.error is not None
        assert "Failed to read" in state.error
        assert state.submitting is False

    @pytest.mark.asyncio
    async def test_corrupt_game_record_routes_through_set_error(
        self, make_runner, active_game, game_store
    ):
        runner = make_runner(active_game)
        play_to_round(runner)
        (game_store.storage_dir / "games" / f"{active_game.id}.json").write_text('{"status": 7}')

        state = await runner.submit_answer("love")

        assert state.error is not None
        assert state.submitting is False
        assert state.rounds == []


class TestResume:
    @pytest.mark.asyncio
    async def test_resume_partial_session(self, make_runner, active_game):
        first = make_runner(active_game)
        play_to_round(first)
        await first.submit_answer("love")
        first.next_round()
        await first.submit_answer("faith")

        second = make_runner(active_game)
        play_to_round(second)

        assert second.screen == GameScreen.ROUND_PLAY
        assert second.state.current_round == 3
        assert second.state.total_score == 200 + 398
        assert len(second.state.rounds) == 2
        assert len(second.state.rounds[0].all_answers) == 400

    @pytest.mark.asyncio
    async def test_resume_completed_session(self, make_runner, active_game):
        first = make_runner(active_game)
        play_to_round(first)
        for answer in ["love", "faith", "worship", "meekness"]:
            await first.submit_answer(answer)
            first.next_round()

        second = make_runner(active_game)
        play_to_round(second)

        assert second.screen == GameScreen.FINAL_RESULTS
        assert second.state.current_round == 4

    def test_resume_without_session_is_noop(self, make_runner, active_game):
        runner = make_runner(active_game, player_id="new-player")
        runner.load()
        before = runner.state
        assert runner.resume() is before
