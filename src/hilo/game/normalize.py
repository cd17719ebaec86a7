"""Answer normalization shared by matching, caching and validation."""

from __future__ import annotations

import re
from typing import Iterable, Optional, TypeVar

_WHITESPACE_RUN = re.compile(r"\s+")

AnswerT = TypeVar("AnswerT")


def normalize_answer(text: str) -> str:
    """Trim, lowercase and collapse internal whitespace runs to one space."""
    return _WHITESPACE_RUN.sub(" ", text.strip().lower())


def find_exact_match(normalized: str, answers: Iterable[AnswerT]) -> Optional[AnswerT]:
    for entry in answers:
        if normalize_answer(entry.answer) == normalized:
            return entry
    return None
