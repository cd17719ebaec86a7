"""Validation of bulk-generated answer sets.

A generated answer list is accepted whole or not at all: the first problem
found raises AnswerSetValidationError and nothing from the set is stored.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Sequence, Union

from hilo.game.domain.entities import FunFact, GameAnswer, GeneratedGame, HistoricalFact
from hilo.game.domain.errors import AnswerSetValidationError
from hilo.game.judge.parser import strip_code_fence
from hilo.game.normalize import normalize_answer

logger = logging.getLogger(__name__)

MIN_ANSWERS = 350
MAX_ANSWERS = 400
MAX_SEED_RANK = 400
FACT_COUNT = 3

AnswerLike = Union[GameAnswer, Mapping[str, Any]]


def _field(item: AnswerLike, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def validate_answers(
    answers: Sequence[AnswerLike],
    min_answers: int = MIN_ANSWERS,
    max_answers: int = MAX_ANSWERS,
    max_rank: int = MAX_SEED_RANK,
) -> None:
    if not min_answers <= len(answers) <= max_answers:
        raise AnswerSetValidationError(
            f"Expected {min_answers}-{max_answers} answers, got {len(answers)}"
        )

    ranks: set[int] = set()
    words: set[str] = set()

    for item in answers:
        answer = _field(item, "answer")
        rank = _field(item, "rank")

        if not isinstance(answer, str) or not answer.strip():
            raise AnswerSetValidationError("Answer contains empty string")

        if isinstance(rank, bool) or not isinstance(rank, int) or not 1 <= rank <= max_rank:
            raise AnswerSetValidationError(f"Invalid rank {rank!r}: must be 1-{max_rank}")

        if rank in ranks:
            raise AnswerSetValidationError(f"Duplicate rank: {rank}")
        ranks.add(rank)

        normalized = normalize_answer(answer)
        if normalized in words:
            raise AnswerSetValidationError(f'Duplicate answer: "{answer}"')
        words.add(normalized)


def parse_generated_game(
    raw: str,
    min_answers: int = MIN_ANSWERS,
    max_answers: int = MAX_ANSWERS,
    max_rank: int = MAX_SEED_RANK,
) -> GeneratedGame:
    """Parse and validate the LLM's bulk generation payload."""
    cleaned = strip_code_fence(raw)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse generated game: %s", cleaned[:500])
        raise AnswerSetValidationError("Failed to parse JSON from generation response") from e

    if not isinstance(parsed, dict):
        raise AnswerSetValidationError("Generation response is not an object")

    for key in ("core_question", "scripture_verses"):
        value = parsed.get(key)
        if not isinstance(value, str) or not value.strip():
            raise AnswerSetValidationError(f"Missing or invalid {key}")

    answers = parsed.get("answers")
    if not isinstance(answers, list):
        raise AnswerSetValidationError("Missing or invalid answers array")

    for key in ("historical_facts", "fun_facts"):
        facts = parsed.get(key)
        if not isinstance(facts, list) or len(facts) != FACT_COUNT:
            raise AnswerSetValidationError(
                f"{key} must be an array of exactly {FACT_COUNT} items"
            )
        if not all(isinstance(f, dict) and isinstance(f.get("fact"), str) for f in facts):
            raise AnswerSetValidationError(f"{key} entries must carry a fact string")

    if not all(isinstance(a, dict) for a in answers):
        raise AnswerSetValidationError("Answers must be objects with answer and rank")

    validate_answers(answers, min_answers=min_answers, max_answers=max_answers, max_rank=max_rank)

    return GeneratedGame(
        core_question=parsed["core_question"].strip(),
        scripture_verses=parsed["scripture_verses"].strip(),
        historical_facts=[
            HistoricalFact(fact=f["fact"], source=str(f.get("source") or ""))
            for f in parsed["historical_facts"]
        ],
        fun_facts=[FunFact(fact=f["fact"]) for f in parsed["fun_facts"]],
        answers=[GameAnswer(answer=a["answer"], rank=a["rank"]) for a in answers],
    )
