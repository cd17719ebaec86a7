"""Parsing helpers for classifier output."""

from __future__ import annotations

import json
import math
import re
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from hilo.game.domain.entities import GameAnswer

NEW_ANSWER_MARKER = "new"
DEFAULT_MAX_AI_RANK = 500
PARSE_ERROR_REASON = "parse error"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?([\s\S]*?)\n?```$")


class JudgeRequest(BaseModel):
    question: str
    submitted_answer: str
    known_answers: List[GameAnswer] = Field(default_factory=list)
    answer_count_target: int = 400


class JudgeResponse(BaseModel):
    valid: bool = False
    rank: Optional[int] = None
    matched_to: Optional[str] = None
    reason: str = ""

    @property
    def is_new_answer(self) -> bool:
        return self.matched_to is None or self.matched_to.strip().lower() == NEW_ANSWER_MARKER


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    match = _CODE_FENCE.match(cleaned)
    if match:
        cleaned = match.group(1).strip()
    return cleaned


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _coerce_rank(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return round_half_up(value)


def parse_judgment(text: str) -> JudgeResponse:
    """Parse a classifier reply; anything unreadable becomes a rejection."""
    try:
        parsed = json.loads(strip_code_fence(text))
    except (json.JSONDecodeError, TypeError, AttributeError):
        return JudgeResponse(valid=False, rank=None, reason=PARSE_ERROR_REASON)

    if not isinstance(parsed, dict):
        return JudgeResponse(valid=False, rank=None, reason=PARSE_ERROR_REASON)

    matched_to = parsed.get("matched_to")
    return JudgeResponse(
        valid=bool(parsed.get("valid")),
        rank=_coerce_rank(parsed.get("rank")),
        matched_to=matched_to if isinstance(matched_to, str) and matched_to.strip() else None,
        reason=str(parsed.get("reason") or ""),
    )


def clamp_rank(rank: float, max_rank: int = DEFAULT_MAX_AI_RANK) -> int:
    return max(1, min(max_rank, round_half_up(rank)))
