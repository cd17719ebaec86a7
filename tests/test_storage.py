"""Tests for GameStore and SubmissionStore."""

from datetime import datetime, timedelta

import pytest

from hilo.game.domain.entities import (
    GameStatus,
    PlayerSession,
    RankedAnswer,
    RoundDirection,
    RoundSubmission,
)
from hilo.game.domain.errors import (
    AnswerSetValidationError,
    DuplicateAnswerError,
    GameNotFoundError,
    ScoringOperationError,
    StorageError,
)
from hilo.game.storage.json_io import safe_filename

from conftest import NOW, make_answers


def submission(round_number, score, total):
    return RoundSubmission(
        round_number=round_number,
        submitted_answer=f"word{round_number}",
        on_list=True,
        rank=10,
        round_score=score,
        total_score=total,
        direction=RoundDirection.HIGH if round_number <= 2 else RoundDirection.LOW,
    )


class TestSafeFilename:
    def test_plain_id_unchanged(self):
        assert safe_filename("abc-123_x.y") == "abc-123_x.y"

    def test_unsafe_characters_replaced(self):
        assert safe_filename("../etc/passwd") == ".._etc_passwd"
        assert safe_filename("a b@c") == "a_b_c"

    def test_empty(self):
        assert safe_filename("") == "_"


class TestGameStore:
    def test_create_and_load(self, game_store):
        game = game_store.create_game(core_question="What makes a good friend?")
        loaded = game_store.load_game(game.id)
        assert loaded.core_question == "What makes a good friend?"
        assert loaded.status == GameStatus.GENERATING
        assert loaded.answer_count == 400
        assert game_store.game_exists(game.id)

    def test_create_with_explicit_id(self, game_store):
        game = game_store.create_game(game_id="week-12")
        assert game.id == "week-12"
        assert game_store.load_game("week-12").id == "week-12"

    def test_load_missing(self, game_store):
        with pytest.raises(GameNotFoundError):
            game_store.load_game("missing")

    def test_list_games_with_filter(self, game_store):
        game_store.create_game(core_question="a", status=GameStatus.READY)
        game_store.create_game(core_question="b", status=GameStatus.ACTIVE)

        assert len(game_store.list_games()) == 2
        ready = game_store.list_games(GameStatus.READY)
        assert [g.core_question for g in ready] == ["a"]

    def test_set_status(self, game_store):
        game = game_store.create_game()
        updated = game_store.set_status(
            game.id,
            GameStatus.ACTIVE,
            opens_at=NOW,
            closes_at=NOW + timedelta(days=7),
        )
        assert updated.status == GameStatus.ACTIVE
        assert game_store.load_game(game.id).closes_at == NOW + timedelta(days=7)

    def test_seed_answers_normalizes_and_counts(self, game_store):
        game = game_store.create_game()
        answers = make_answers(360, named={1: "  Love ", 2: "Holy   Spirit"})

        game_store.seed_answers(game.id, answers)

        stored = game_store.get_answers(game.id)
        assert len(stored) == 360
        assert stored[0].answer == "love"
        assert stored[1].answer == "holy spirit"
        assert all(not a.is_ai_judged for a in stored)
        assert game_store.load_game(game.id).answer_count == 360

    def test_seed_rejects_invalid_set(self, game_store):
        game = game_store.create_game()
        game_store.seed_answers(game.id, make_answers(400))

        with pytest.raises(AnswerSetValidationError):
            game_store.seed_answers(game.id, make_answers(100))

        assert len(game_store.get_answers(game.id)) == 400

    def test_get_answers_sorted_by_rank(self, game_store):
        game = game_store.create_game()
        game_store.insert_answer(game.id, RankedAnswer(answer="b", rank=20))
        game_store.insert_answer(game.id, RankedAnswer(answer="a", rank=3))
        assert [a.rank for a in game_store.get_answers(game.id)] == [3, 20]

    def test_insert_answer_duplicate(self, game_store):
        game = game_store.create_game()
        stored = game_store.insert_answer(
            game.id, RankedAnswer(answer=" Mercy ", rank=120, is_ai_judged=True)
        )
        assert stored.answer == "mercy"

        with pytest.raises(DuplicateAnswerError):
            game_store.insert_answer(game.id, RankedAnswer(answer="MERCY", rank=300))

        answers = game_store.get_answers(game.id)
        assert len(answers) == 1
        assert answers[0].rank == 120

    def test_answers_for_unknown_game_empty(self, game_store):
        assert game_store.get_answers("nothing") == []

    def test_corrupt_answer_list_raises_storage_error(self, game_store):
        game = game_store.create_game()
        (game_store.storage_dir / "answers" / f"{game.id}.json").write_text("[{\"answer\": ")

        with pytest.raises(StorageError) as exc_info:
            game_store.get_answers(game.id)
        assert isinstance(exc_info.value, ScoringOperationError)

    def test_invalid_game_record_raises_storage_error(self, game_store):
        game = game_store.create_game()
        (game_store.storage_dir / "games" / f"{game.id}.json").write_text('{"status": "paused"}')

        with pytest.raises(StorageError):
            game_store.load_game(game.id)
        assert game_store.list_games() == []


class TestSubmissionStore:
    def test_get_or_create_session(self, submission_store):
        session = submission_store.get_or_create_session("g1", "player-1", "Sam")
        again = submission_store.get_or_create_session("g1", "player-1")
        assert again.session_id == session.session_id
        assert again.first_name == "Sam"

    def test_missing_session(self, submission_store):
        assert submission_store.get_session("g1", "nobody") is None

    def test_corrupt_session_raises_storage_error(self, submission_store):
        submission_store.get_or_create_session("g1", "player-1")
        (submission_store.sessions_dir / "g1" / "player-1.json").write_text("")

        with pytest.raises(StorageError):
            submission_store.get_session("g1", "player-1")
        assert submission_store.list_sessions("g1") == []

    def test_save_round_trip(self, submission_store):
        session = PlayerSession(game_id="g1", player_id="player-1")
        session.record(submission(1, 150, 150))
        submission_store.save_session(session)

        loaded = submission_store.get_session("g1", "player-1")
        assert loaded.total_score == 150
        assert loaded.rounds[0].direction == RoundDirection.HIGH

    def test_list_sessions_per_game(self, submission_store):
        submission_store.get_or_create_session("g1", "a")
        submission_store.get_or_create_session("g1", "b")
        submission_store.get_or_create_session("g2", "c")
        assert {s.player_id for s in submission_store.list_sessions("g1")} == {"a", "b"}
        assert submission_store.list_sessions("none") == []


class TestLeaderboard:
    def _store_session(self, store, player_id, scores, completed_at=None):
        session = PlayerSession(game_id="g1", player_id=player_id, first_name=player_id.title())
        total = 0
        for round_number, score in enumerate(scores, start=1):
            total += score
            session.record(submission(round_number, score, total))
        if completed_at is not None:
            session.completed_at = completed_at
        store.save_session(session)

    def test_ordering_and_ties(self, submission_store):
        base = datetime(2026, 3, 1, 12, 0, 0)
        self._store_session(submission_store, "early", [100, 100, 100, 100], base)
        self._store_session(submission_store, "late", [100, 100, 100, 100], base + timedelta(hours=1))
        self._store_session(submission_store, "partial", [200, 200])
        self._store_session(submission_store, "best", [200, 400, 600, 100], base)
        submission_store.get_or_create_session("g1", "no-rounds")

        entries = submission_store.leaderboard("g1")

        assert [e.player_id for e in entries] == ["best", "early", "late", "partial"]
        assert [e.player_rank for e in entries] == [1, 2, 2, 2]
        assert entries[0].total_score == 1300
        assert entries[3].completed_at is None

    def test_limit(self, submission_store):
        self._store_session(submission_store, "a", [10])
        self._store_session(submission_store, "b", [20])
        entries = submission_store.leaderboard("g1", limit=1)
        assert [e.player_id for e in entries] == ["b"]

    def test_empty(self, submission_store):
        assert submission_store.leaderboard("g1") == []
