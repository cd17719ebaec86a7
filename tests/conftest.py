"""Shared fixtures for the Hi-Lo test suite."""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from hilo.config.models import DirectoriesConfig, GameConfig
from hilo.game.domain.entities import GameAnswer, GameStatus
from hilo.game.storage import GameStore, SubmissionStore

NOW = datetime(2026, 3, 1, 12, 0, 0)

NAMED_RANKS = {
    1: "love",
    2: "faith",
    5: "prays",
    50: "kindness",
    150: "serve",
    200: "worship",
    300: "patience",
    400: "meekness",
}


def make_answers(count=400, named=None):
    named = NAMED_RANKS if named is None else named
    return [
        GameAnswer(answer=named.get(rank, f"word{rank}"), rank=rank)
        for rank in range(1, count + 1)
    ]


@pytest.fixture
def temp_storage_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def game_config():
    return GameConfig(directories=DirectoriesConfig(game_storage_dir="game_storage"))


@pytest.fixture
def game_store(game_config, temp_storage_dir):
    return GameStore(config=game_config, base_dir=temp_storage_dir)


@pytest.fixture
def submission_store(game_config, temp_storage_dir):
    return SubmissionStore(config=game_config, base_dir=temp_storage_dir)


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def active_game(game_store):
    game = game_store.create_game(
        core_question="What one word describes God's love?",
        status=GameStatus.ACTIVE,
        opens_at=NOW - timedelta(hours=1),
        closes_at=NOW + timedelta(days=1),
    )
    game_store.seed_answers(game.id, make_answers())
    return game_store.load_game(game.id)
