"""Domain entities for the Hi-Lo game engine.

This module defines the core domain entities:
- Game: one question instance with its play window
- RankedAnswer: one entry in a game's crowd-ranked answer list
- RoundSubmission: a player's resolved hit for one round (immutable)
- PlayerSession: a player's persisted progress through a game
- RoundResult: what the scoring operation reports back for a submission
- Devotional / GeneratedGame: input and output of bulk game generation
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GameStatus(str, Enum):
    GENERATING = "generating"
    READY = "ready"
    ACTIVE = "active"
    COMPLETED = "completed"
    # Never stored; reported by Game.effective_status once closes_at has passed.
    EXPIRED = "expired"


class RoundDirection(str, Enum):
    HIGH = "high"
    LOW = "low"


class GameAnswer(BaseModel):
    answer: str
    rank: int


class RankedAnswer(BaseModel):
    answer: str
    rank: int
    is_ai_judged: bool = False

    def as_game_answer(self) -> GameAnswer:
        return GameAnswer(answer=self.answer, rank=self.rank)


class HistoricalFact(BaseModel):
    fact: str
    source: str = ""


class FunFact(BaseModel):
    fact: str


class Game(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    core_question: str = ""
    answer_count: int = 400
    status: GameStatus = GameStatus.GENERATING
    opens_at: Optional[datetime] = None
    closes_at: Optional[datetime] = None
    scripture_verses: str = ""
    historical_facts: List[HistoricalFact] = Field(default_factory=list)
    fun_facts: List[FunFact] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def is_open(self, now: datetime) -> bool:
        if self.status != GameStatus.ACTIVE:
            return False
        if self.opens_at is None or self.closes_at is None:
            return False
        return self.opens_at <= now < self.closes_at

    def effective_status(self, now: datetime) -> GameStatus:
        if self.status != GameStatus.ACTIVE:
            return self.status
        if self.closes_at is not None and now >= self.closes_at:
            return GameStatus.EXPIRED
        return GameStatus.ACTIVE


class RoundSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    round_number: int
    submitted_answer: str
    on_list: bool
    rank: Optional[int] = None
    round_score: int
    total_score: int
    direction: RoundDirection
    created_at: datetime = Field(default_factory=datetime.now)


class PlayerSession(BaseModel):
    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    game_id: str
    player_id: str
    first_name: str = ""
    rounds: List[RoundSubmission] = Field(default_factory=list)
    total_score: int = 0
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def next_round_number(self) -> int:
        return len(self.rounds) + 1

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def get_round(self, round_number: int) -> Optional[RoundSubmission]:
        for submission in self.rounds:
            if submission.round_number == round_number:
                return submission
        return None

    def record(self, submission: RoundSubmission, round_count: int = 4) -> None:
        self.rounds.append(submission)
        self.total_score = sum(r.round_score for r in self.rounds)
        self.updated_at = datetime.now()
        if len(self.rounds) >= round_count and self.completed_at is None:
            self.completed_at = self.updated_at


class RoundResult(BaseModel):
    session_id: Optional[str] = None
    round_number: int
    submitted_answer: str
    on_list: bool
    rank: Optional[int] = None
    round_score: int = 0
    total_score: int = 0
    direction: RoundDirection
    all_answers: List[GameAnswer] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    player_id: str
    first_name: str = ""
    total_score: int
    completed_at: Optional[datetime] = None
    player_rank: int


class Devotional(BaseModel):
    title: str
    scripture_reference: Optional[str] = None
    scripture_text: Optional[str] = None
    reflection: Optional[str] = None
    discussion_question: Optional[str] = None


class GeneratedGame(BaseModel):
    core_question: str
    scripture_verses: str
    historical_facts: List[HistoricalFact]
    fun_facts: List[FunFact]
    answers: List[GameAnswer]
