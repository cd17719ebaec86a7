"""Bulk generation of a game's content and ranked answer list."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from hilo.config import ConfigLoader, GameConfig
from hilo.game.domain.entities import Devotional, Game, GameStatus, GeneratedGame
from hilo.game.storage.game_store import GameStore
from hilo.game.validator import parse_generated_game
from hilo.models.base import LLMClient

logger = logging.getLogger(__name__)


GENERATION_PROMPT = """You are creating content for a trivia game called "Hi-Lo" for youth ministry students (grades 6-12).

## SOURCE DEVOTIONAL
{devotional_block}

## YOUR TASK

Generate a complete Hi-Lo game package with these components:

### 1. scripture_verses
Select the most impactful 2-4 verses from the devotional's scripture passage. If the devotional only has 1-2 verses, include all of them. Format as a readable text block with the reference.

### 2. historical_facts (exactly 3)
Three real historical facts about the time period, culture, or setting of the scripture passage. Each must be accurate, connected to the scripture and interesting to teenagers, with a brief source context (e.g. "1st century Palestine").

### 3. fun_facts (exactly 3)
Three surprising or entertaining facts from the same era: daily life, food, games or customs.

### 4. core_question
A single question that can be answered in ONE WORD. It must be grounded in the devotional, answerable by teenagers and open-ended enough that many different words are valid answers.
The question MUST elicit positive, uplifting or neutral answers. If the theme is dark, reframe it toward hope. The #1 ranked answer must never be a negative or dark word.

### 5. answers ({min_answers}-{max_answers} ranked answers)
Imagine you surveyed 100,000 teenagers with this question. Rank single-word answers from 1 (what most would say) to N (what almost no one would think of).
- Rank 1 MUST be the devotional's actual theme word.
- Each answer is a single word, or at most two words for a compound concept.
- Ranks are unique integers between 1 and {max_rank}.
- NO duplicate words, NO profanity, crude, sexual, occult or violent words.
- Mix nouns, verbs, adjectives and adverbs in everyday teen vocabulary.

## OUTPUT FORMAT
Return ONLY a JSON object (no other text):
{{
  "scripture_verses": "string with the selected verses and reference",
  "historical_facts": [{{"fact": "...", "source": "..."}}, ...3 items],
  "fun_facts": [{{"fact": "..."}}, ...3 items],
  "core_question": "...",
  "answers": [{{"answer": "...", "rank": 1}}, ...]
}}"""


class GameGenerator:
    def __init__(
        self,
        llm_client: LLMClient,
        game_store: GameStore,
        game_config: Optional[GameConfig] = None,
    ):
        if game_config is None:
            game_config = ConfigLoader().load_game_config()

        self._llm_client = llm_client
        self._game_store = game_store
        self._config = game_config

    def build_generation_prompt(self, devotional: Devotional) -> str:
        lines = [f"Title: {devotional.title}"]
        if devotional.scripture_reference:
            lines.append(f"Scripture: {devotional.scripture_reference}")
        if devotional.scripture_text:
            lines.append(f'"{devotional.scripture_text}"')
        if devotional.reflection:
            lines.append(f"Reflection: {devotional.reflection}")
        if devotional.discussion_question:
            lines.append(f"Discussion Question: {devotional.discussion_question}")

        generation = self._config.generation
        return GENERATION_PROMPT.format(
            devotional_block="\n".join(lines),
            min_answers=generation.min_answers,
            max_answers=generation.max_answers,
            max_rank=generation.max_rank,
        )

    async def generate(self, game_id: str, devotional: Devotional) -> Game:
        """Generate, validate and store a game's content.

        The game sits in ``generating`` while the model runs. Any failure puts
        it back to ``ready`` with its previous answers intact and re-raises.
        """
        self._game_store.set_status(game_id, GameStatus.GENERATING)
        generation = self._config.generation

        try:
            raw = await self._llm_client.agenerate(self.build_generation_prompt(devotional))
            generated = parse_generated_game(
                raw,
                min_answers=generation.min_answers,
                max_answers=generation.max_answers,
                max_rank=generation.max_rank,
            )
            self._game_store.seed_answers(game_id, generated.answers)
        except Exception as e:
            logger.error("Game generation failed for %s: %s", game_id, e)
            self._game_store.set_status(game_id, GameStatus.READY)
            raise

        game = self._store_content(game_id, generated)
        logger.info(
            "Generated game %s: %r with %d answers",
            game_id,
            game.core_question,
            game.answer_count,
        )
        return game

    def _store_content(self, game_id: str, generated: GeneratedGame) -> Game:
        with self._game_store.lock:
            game = self._game_store.load_game(game_id)
            game.core_question = generated.core_question
            game.scripture_verses = generated.scripture_verses
            game.historical_facts = list(generated.historical_facts)
            game.fun_facts = list(generated.fun_facts)
            game.status = GameStatus.READY
            game.updated_at = datetime.now()
            self._game_store.save_game(game)
        return game
