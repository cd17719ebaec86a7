"""CLI command handlers for the Hi-Lo game engine.

This module provides individual command implementations that can be used
by the CLI entry point or tested independently.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from hilo.game.domain.entities import Devotional, Game, GameAnswer, GameStatus
from hilo.game.domain.errors import HiLoError
from hilo.game.engine import HiLoEngine
from hilo.game.scoring import round_max_score
from hilo.game.state_machine import GameScreen
from hilo.game.validator import parse_generated_game, validate_answers


@dataclass
class CommandResult:
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def _game_summary(game: Game) -> Dict[str, Any]:
    return {
        "id": game.id,
        "core_question": game.core_question,
        "status": game.status.value,
        "answer_count": game.answer_count,
        "opens_at": game.opens_at.isoformat() if game.opens_at else None,
        "closes_at": game.closes_at.isoformat() if game.closes_at else None,
        "created_at": game.created_at.isoformat(),
    }


def _load_json(path: str) -> Any:
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def show_config(engine: HiLoEngine) -> CommandResult:
    models = engine.models_config
    active = models.get_active_config()
    judge = engine.agents_config.judge
    return CommandResult(
        success=True,
        message="Current configuration.",
        data={
            "provider": models.provider,
            "model": active.llm_model_name,
            "base_url": active.base_url,
            "game_storage_dir": str(engine.game_store.storage_dir),
            "rank_ceiling": engine.game_config.scoring.rank_ceiling,
            "judge": judge.model_dump(),
            "generation": engine.game_config.generation.model_dump(),
        },
    )


def list_games(engine: HiLoEngine, status_filter: Optional[str] = None) -> CommandResult:
    try:
        status = None
        if status_filter:
            try:
                status = GameStatus(status_filter)
            except ValueError:
                return CommandResult(
                    success=False,
                    message=f"Invalid status: {status_filter}",
                    error=f"Valid statuses: {', '.join(s.value for s in GameStatus)}",
                )

        games = engine.list_games(status)
        return CommandResult(
            success=True,
            message=f"Found {len(games)} game(s).",
            data={"games": [_game_summary(g) for g in games]},
        )
    except Exception as e:
        return CommandResult(
            success=False,
            message="Failed to list games.",
            error=str(e),
        )


def create_game(
    engine: HiLoEngine,
    core_question: str,
    answers_path: Optional[str] = None,
) -> CommandResult:
    try:
        answers: Optional[List[GameAnswer]] = None
        if answers_path:
            answers = [GameAnswer.model_validate(a) for a in _load_json(answers_path)]
        game = engine.create_game(core_question, answers)
    except (HiLoError, OSError, ValueError) as e:
        return CommandResult(
            success=False,
            message=f"Failed to create game: {e}",
            error=str(e),
        )

    return CommandResult(
        success=True,
        message=f"Game created: {game.id}",
        data=_game_summary(game),
    )


def validate_answers_file(path: str) -> CommandResult:
    """Validate an answer list, or a full generation payload, from a JSON file."""
    try:
        with open(Path(path), "r", encoding="utf-8") as f:
            raw = f.read()
        payload = json.loads(raw)
        if isinstance(payload, dict):
            generated = parse_generated_game(raw)
            count = len(generated.answers)
        else:
            validate_answers(payload)
            count = len(payload)
    except (HiLoError, OSError, ValueError) as e:
        return CommandResult(
            success=False,
            message="Answer set rejected.",
            error=str(e),
        )

    return CommandResult(
        success=True,
        message=f"Answer set is valid ({count} answers).",
        data={"answer_count": count},
    )


async def generate_game(
    engine: HiLoEngine,
    devotional_path: str,
    game_id: Optional[str] = None,
) -> CommandResult:
    try:
        devotional = Devotional.model_validate(_load_json(devotional_path))
        if game_id is None:
            game_id = engine.game_store.create_game().id
        game = await engine.generate_game(game_id, devotional)
    except Exception as e:
        return CommandResult(
            success=False,
            message="Game generation failed.",
            error=str(e),
        )

    return CommandResult(
        success=True,
        message=f"Generated game {game.id}: {game.core_question}",
        data=_game_summary(game),
    )


def activate_game(engine: HiLoEngine, game_id: str, hours: float = 168.0) -> CommandResult:
    try:
        game = engine.get_game(game_id)
        if not engine.get_answers(game.id):
            return CommandResult(
                success=False,
                message=f"Game {game_id} has no answers yet.",
                error="Generate or seed answers before activating.",
            )
        game = engine.activate_game(game.id, window=timedelta(hours=hours))
    except HiLoError as e:
        return CommandResult(
            success=False,
            message=f"Failed to activate game: {e}",
            error=str(e),
        )

    return CommandResult(
        success=True,
        message=f"Game {game.id} is active until {game.closes_at.isoformat()}",
        data=_game_summary(game),
    )


def show_leaderboard(
    engine: HiLoEngine,
    game_id: str,
    limit: Optional[int] = None,
) -> CommandResult:
    try:
        entries = engine.leaderboard(game_id, limit=limit)
    except HiLoError as e:
        return CommandResult(
            success=False,
            message=f"Failed to load leaderboard: {e}",
            error=str(e),
        )

    return CommandResult(
        success=True,
        message=f"{len(entries)} player(s) on the leaderboard.",
        data={"game_id": game_id, "entries": [e.model_dump(mode="json") for e in entries]},
    )


def _round_prompt(round_number: int) -> str:
    if round_number <= 2:
        return (
            f"Round {round_number} (HIGH): name a popular answer. "
            f"Best possible: {round_max_score(round_number)} points."
        )
    return (
        f"Round {round_number} (LOW): name a rare answer that is still on the list. "
        f"Best possible: {round_max_score(round_number)} points."
    )


async def play_game(
    engine: HiLoEngine,
    game_id: str,
    player_id: str,
    first_name: str,
    input_handler: Callable[[], str],
    output_handler: Callable[[str], None],
) -> CommandResult:
    try:
        runner = engine.create_runner(game_id, player_id)
    except HiLoError as e:
        return CommandResult(
            success=False,
            message=f"Game not found: {game_id}",
            error=str(e),
        )

    runner.load()
    if runner.screen == GameScreen.EXPIRED:
        output_handler("This game is not open for play.")
        return CommandResult(
            success=True,
            message="Game is closed.",
            data={"screen": runner.screen.value},
        )

    output_handler(f"Question: {runner.game.core_question}")
    runner.start()
    runner.authenticate(player_id, first_name)
    runner.resume()

    while runner.screen in (GameScreen.ROUND_PLAY, GameScreen.ROUND_RESULT):
        state = runner.state

        if state.screen == GameScreen.ROUND_RESULT:
            last = state.rounds[-1]
            output_handler(
                f'"{last.submitted_answer}" is #{last.rank}: '
                f"+{last.round_score} points (total {state.total_score})"
            )
            runner.next_round()
            continue

        output_handler(_round_prompt(state.current_round))
        try:
            answer = input_handler()
        except (EOFError, KeyboardInterrupt):
            return CommandResult(
                success=True,
                message="Game interrupted by user.",
                data={"interrupted": True, "total_score": runner.state.total_score},
            )

        if not answer.strip():
            continue

        state = await runner.submit_answer(answer)
        if state.error:
            output_handler(f"Error: {state.error}")
            return CommandResult(
                success=False,
                message="Error during gameplay.",
                error=state.error,
            )
        if state.last_miss is not None:
            output_handler(f'"{state.last_miss}" is not on the list. Try again.')

    if runner.screen == GameScreen.EXPIRED:
        output_handler("This game has closed.")
        return CommandResult(
            success=True,
            message="Game closed during play.",
            data={"screen": runner.screen.value, "total_score": runner.state.total_score},
        )

    state = runner.state
    return CommandResult(
        success=True,
        message=f"Game completed. Final score: {state.total_score}",
        data={
            "session_id": state.session_id,
            "total_score": state.total_score,
            "rounds": [r.model_dump(mode="json", exclude={"all_answers"}) for r in state.rounds],
        },
    )
