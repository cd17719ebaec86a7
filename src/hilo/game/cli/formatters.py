"""CLI output formatters for the Hi-Lo game engine.

This module provides consistent formatting for CLI output,
supporting both plain text and JSON output modes.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Protocol

from hilo.game.cli.commands import CommandResult


class OutputFormatter(Protocol):
    def format_result(self, result: CommandResult) -> str:
        ...

    def format_games(self, games: List[Dict[str, Any]]) -> str:
        ...

    def format_leaderboard(self, game_id: str, entries: List[Dict[str, Any]]) -> str:
        ...

    def format_config(self, config: Dict[str, Any]) -> str:
        ...

    def format_error(self, message: str, error: Optional[str] = None) -> str:
        ...


class TextFormatter:
    def format_result(self, result: CommandResult) -> str:
        if not result.success:
            return self.format_error(result.message, result.error)
        return result.message

    def format_games(self, games: List[Dict[str, Any]]) -> str:
        if not games:
            return "No games found."

        lines = [f"\n{'='*50}", "Games", f"{'='*50}\n"]

        for g in games:
            lines.append(f"Game: {g['id']}")
            lines.append(f"  Question: {g['core_question'] or '(not generated)'}")
            lines.append(f"  Status: {g['status']}")
            lines.append(f"  Answers: {g['answer_count']}")
            if g.get('opens_at'):
                lines.append(f"  Window: {g['opens_at']} -> {g['closes_at']}")
            lines.append("")

        return "\n".join(lines)

    def format_leaderboard(self, game_id: str, entries: List[Dict[str, Any]]) -> str:
        if not entries:
            return "No scores yet."

        lines = [f"\n{'='*50}", f"Leaderboard: {game_id}", f"{'='*50}\n"]

        for e in entries:
            name = e.get('first_name') or e['player_id']
            status = "" if e.get('completed_at') else " (in progress)"
            lines.append(f"{e['player_rank']:>3}. {name:<20} {e['total_score']:>5}{status}")

        return "\n".join(lines)

    def format_config(self, config: Dict[str, Any]) -> str:
        lines = [f"\n{'='*50}", "Configuration", f"{'='*50}\n"]
        for key, value in config.items():
            if isinstance(value, dict):
                lines.append(f"{key}:")
                for sub_key, sub_value in value.items():
                    lines.append(f"  {sub_key}: {sub_value}")
            else:
                lines.append(f"{key}: {value}")
        return "\n".join(lines)

    def format_error(self, message: str, error: Optional[str] = None) -> str:
        lines = [f"\nError: {message}"]
        if error:
            lines.append(f"Details: {error}")
        return "\n".join(lines)


class JsonFormatter:
    def format_result(self, result: CommandResult) -> str:
        return json.dumps({
            "success": result.success,
            "message": result.message,
            "data": result.data,
            "error": result.error,
        }, indent=2, default=str)

    def format_games(self, games: List[Dict[str, Any]]) -> str:
        return json.dumps({"games": games}, indent=2, default=str)

    def format_leaderboard(self, game_id: str, entries: List[Dict[str, Any]]) -> str:
        return json.dumps({"game_id": game_id, "entries": entries}, indent=2, default=str)

    def format_config(self, config: Dict[str, Any]) -> str:
        return json.dumps({"config": config}, indent=2, default=str)

    def format_error(self, message: str, error: Optional[str] = None) -> str:
        return json.dumps({
            "success": False,
            "message": message,
            "error": error,
        }, indent=2)


def get_formatter(json_mode: bool = False) -> OutputFormatter:
    return JsonFormatter() if json_mode else TextFormatter()
