"""Answer classifier capability and its LLM-backed implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from hilo.config import JudgeConfig
from hilo.game.domain.errors import ClassifierParseError, ClassifierUnavailableError
from hilo.game.judge.parser import (
    PARSE_ERROR_REASON,
    JudgeRequest,
    JudgeResponse,
    parse_judgment,
)
from hilo.models.base import LLMClient

logger = logging.getLogger(__name__)


class AnswerClassifier(ABC):
    @abstractmethod
    async def judge(self, request: JudgeRequest) -> JudgeResponse:
        ...


class LLMAnswerClassifier(AnswerClassifier):
    def __init__(
        self,
        llm_client: LLMClient,
        judge_config: Optional[JudgeConfig] = None,
    ):
        self._llm_client = llm_client
        self._config = judge_config or JudgeConfig()

    async def judge(self, request: JudgeRequest) -> JudgeResponse:
        prompt = self.build_prompt(request)
        try:
            text = await self._llm_client.agenerate(prompt)
        except httpx.HTTPError as e:
            raise ClassifierUnavailableError(f"Classifier request failed: {e}") from e

        judgment = parse_judgment(text)
        if not judgment.valid and judgment.reason == PARSE_ERROR_REASON:
            logger.warning("Unparseable classifier output: %r", text[:200])
            raise ClassifierParseError(f"Unparseable classifier output: {text[:80]!r}")
        return judgment

    def build_prompt(self, request: JudgeRequest) -> str:
        answer = request.submitted_answer
        ranked = "\n".join(f"{a.rank}. {a.answer}" for a in request.known_answers)
        rank_ceiling = min(request.answer_count_target + 50, self._config.max_ai_rank)

        return f"""You are the game manager for a Hi-Lo youth ministry trivia game.

Question: "{request.question}"
Player's answer: "{answer}"

Existing ranked answers (1 = most popular, {request.answer_count_target} = least):
{ranked}

Judge the player's answer by applying these steps IN ORDER and stopping at the first that applies:

1. REJECT if ANY of these apply:
   - Profanity, slurs, crude humor
   - Sexual or suggestive content
   - Demonic/occult words (satan, demon, hell-as-swear, witchcraft, curse, etc.)
   - Violent words (kill, murder, stab) unless clearly biblical (e.g., "sacrifice")
   - Not actually answering the question
   - A youth pastor would be uncomfortable seeing it on screen
   Respond with valid=false, rank=null, matched_to=null.

2. EQUIVALENT MATCH: if "{answer}" is a word form (plural, past tense, gerund) or a true
   synonym of an existing answer, it matches that answer. A true synonym means the two
   could be swapped in a sentence about the question without changing its meaning;
   merely related words are NOT a match.
   Respond with valid=true, that answer's rank, and matched_to set to that answer's exact text.

3. NEW VALID ANSWER: a legitimate answer that is not on the list. Assign the rank it would
   have if 100,000 teens were surveyed. Common answers belong just below the tail of the
   existing list; obscure answers go further down. Ranks range from 1 to {rank_ceiling}.
   Respond with valid=true, your rank, and matched_to="new".

Respond in JSON ONLY:
{{"valid": true/false, "rank": <number or null>, "matched_to": "<existing answer>" | "new" | null, "reason": "<5 words max>"}}"""
