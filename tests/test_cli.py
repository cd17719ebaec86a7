"""Tests for the engine, CLI commands and formatters."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import yaml

from hilo.game.cli.commands import (
    CommandResult,
    activate_game,
    create_game,
    generate_game,
    list_games,
    play_game,
    show_config,
    show_leaderboard,
    validate_answers_file,
)
from hilo.game.cli.formatters import JsonFormatter, TextFormatter, get_formatter
from hilo.game.cli.main import create_parser
from hilo.game.domain.entities import GameStatus
from hilo.game.engine import HiLoEngine
from hilo.game.judge.parser import JudgeResponse

from conftest import NOW, make_answers


@pytest.fixture
def classifier():
    mock = MagicMock()
    mock.judge = AsyncMock(return_value=JudgeResponse(valid=False, reason="off topic"))
    return mock


@pytest.fixture
def engine(temp_storage_dir, classifier):
    config_dir = temp_storage_dir / "config"
    config_dir.mkdir()
    with open(config_dir / "game.yaml", "w") as f:
        yaml.dump({"directories": {"game_storage_dir": "game_storage"}}, f)
    with open(config_dir / "agents.yaml", "w") as f:
        yaml.dump({"observability": {"log_game_events": False}}, f)

    return HiLoEngine(
        config_dir=config_dir,
        base_dir=temp_storage_dir,
        classifier=classifier,
        clock=lambda: NOW,
    )


@pytest.fixture
def answers_file(temp_storage_dir):
    path = temp_storage_dir / "answers.json"
    with open(path, "w") as f:
        json.dump([a.model_dump() for a in make_answers()], f)
    return path


@pytest.fixture
def ready_game(engine):
    return engine.create_game("What one word describes God's love?", make_answers())


class TestEngine:
    def test_create_game_with_answers_is_ready(self, engine, ready_game):
        assert ready_game.status == GameStatus.READY
        assert ready_game.answer_count == 400
        assert len(engine.get_answers(ready_game.id)) == 400

    def test_create_game_without_answers_is_generating(self, engine):
        game = engine.create_game("Pending")
        assert game.status == GameStatus.GENERATING

    def test_activate_sets_window(self, engine, ready_game):
        game = engine.activate_game(ready_game.id)
        assert game.status == GameStatus.ACTIVE
        assert game.opens_at == NOW
        assert game.closes_at == NOW + timedelta(days=7)
        assert game.is_open(NOW)

    def test_generator_uses_registry(self, engine):
        with patch.object(engine.model_registry, "get_llm_client") as mock_get:
            generator = engine.generator
            assert engine.generator is generator
            _, kwargs = mock_get.call_args
            assert kwargs["max_tokens"] == 16384


class TestCommands:
    def test_show_config(self, engine):
        result = show_config(engine)
        assert result.success
        assert result.data["provider"] == "ollama"
        assert result.data["rank_ceiling"] == 200
        assert result.data["judge"]["max_ai_rank"] == 500

    def test_create_and_list_games(self, engine, answers_file):
        result = create_game(engine, "What makes a good friend?", str(answers_file))
        assert result.success
        assert result.data["status"] == "ready"

        listed = list_games(engine)
        assert listed.success
        assert len(listed.data["games"]) == 1

        filtered = list_games(engine, "active")
        assert filtered.data["games"] == []

    def test_list_games_invalid_status(self, engine):
        result = list_games(engine, "bogus")
        assert not result.success
        assert "Invalid status" in result.message

    def test_create_game_bad_answers(self, engine, temp_storage_dir):
        path = temp_storage_dir / "short.json"
        with open(path, "w") as f:
            json.dump([{"answer": "love", "rank": 1}], f)

        result = create_game(engine, "Question", str(path))
        assert not result.success

    def test_validate_answers_file(self, answers_file):
        result = validate_answers_file(str(answers_file))
        assert result.success
        assert result.data["answer_count"] == 400

    def test_validate_answers_file_rejects(self, temp_storage_dir):
        path = temp_storage_dir / "dupes.json"
        answers = [a.model_dump() for a in make_answers()]
        answers[1]["rank"] = 1
        with open(path, "w") as f:
            json.dump(answers, f)

        result = validate_answers_file(str(path))
        assert not result.success
        assert "Duplicate rank" in result.error

    def test_validate_missing_file(self, temp_storage_dir):
        result = validate_answers_file(str(temp_storage_dir / "nope.json"))
        assert not result.success

    def test_activate_requires_answers(self, engine):
        game = engine.create_game("Pending")
        result = activate_game(engine, game.id)
        assert not result.success

    def test_activate_game(self, engine, ready_game):
        result = activate_game(engine, ready_game.id, hours=2)
        assert result.success
        assert result.data["status"] == "active"

    def test_activate_unknown_game(self, engine):
        assert not activate_game(engine, "missing").success

    @pytest.mark.asyncio
    async def test_generate_game_failure(self, engine, temp_storage_dir):
        path = temp_storage_dir / "devotional.json"
        with open(path, "w") as f:
            json.dump({"title": "Love Is Patient"}, f)

        llm = MagicMock()
        llm.agenerate = AsyncMock(return_value="not json")
        with patch.object(engine.model_registry, "get_llm_client", return_value=llm):
            result = await generate_game(engine, str(path))

        assert not result.success
        assert result.message == "Game generation failed."

    def test_leaderboard_unknown_game(self, engine):
        assert not show_leaderboard(engine, "missing").success


class TestPlayGame:
    @pytest.mark.asyncio
    async def test_plays_four_rounds(self, engine, ready_game):
        engine.activate_game(ready_game.id)
        inputs = iter(["pizza", "love", "faith", "worship", "meekness"])
        output = []

        result = await play_game(
            engine, ready_game.id, "player-1", "Sam", lambda: next(inputs), output.append
        )

        assert result.success
        assert result.data["total_score"] == 200 + 398 + 600 + 800
        assert any("not on the list" in line for line in output)

        board = show_leaderboard(engine, ready_game.id)
        assert board.data["entries"][0]["first_name"] == "Sam"
        assert board.data["entries"][0]["player_rank"] == 1

    @pytest.mark.asyncio
    async def test_closed_game(self, engine, ready_game):
        output = []
        result = await play_game(
            engine, ready_game.id, "player-1", "", lambda: "love", output.append
        )
        assert result.success
        assert result.message == "Game is closed."

    @pytest.mark.asyncio
    async def test_interrupted(self, engine, ready_game):
        engine.activate_game(ready_game.id)

        def interrupt():
            raise EOFError

        result = await play_game(engine, ready_game.id, "player-1", "", interrupt, lambda m: None)
        assert result.data["interrupted"] is True

    @pytest.mark.asyncio
    async def test_unknown_game(self, engine):
        result = await play_game(engine, "missing", "p", "", lambda: "", lambda m: None)
        assert not result.success


class TestFormatters:
    def test_get_formatter(self):
        assert isinstance(get_formatter(False), TextFormatter)
        assert isinstance(get_formatter(True), JsonFormatter)

    def test_text_error(self):
        result = CommandResult(success=False, message="Failed", error="boom")
        text = TextFormatter().format_result(result)
        assert "Error: Failed" in text
        assert "Details: boom" in text

    def test_json_result(self):
        result = CommandResult(success=True, message="ok", data={"n": 1})
        parsed = json.loads(JsonFormatter().format_result(result))
        assert parsed["success"] is True
        assert parsed["data"] == {"n": 1}

    def test_text_leaderboard(self):
        entries = [
            {"player_id": "p1", "first_name": "Sam", "total_score": 1500,
             "completed_at": "2026-03-01T12:00:00", "player_rank": 1},
            {"player_id": "p2", "first_name": "", "total_score": 300,
             "completed_at": None, "player_rank": 2},
        ]
        text = TextFormatter().format_leaderboard("g1", entries)
        assert "Sam" in text
        assert "p2" in text
        assert "(in progress)" in text

    def test_text_games_empty(self):
        assert TextFormatter().format_games([]) == "No games found."


class TestParser:
    def test_play_arguments(self):
        args = create_parser().parse_args(["--json", "play", "--game", "g1", "--player", "p1"])
        assert args.json is True
        assert args.command == "play"
        assert args.game == "g1"
        assert args.player == "p1"
        assert args.name == ""

    def test_activate_hours(self):
        args = create_parser().parse_args(["activate", "-g", "g1", "--hours", "24"])
        assert args.hours == 24.0

    def test_games_status_choices(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["games", "--status", "expired"])
