"""Configuration data models using Pydantic."""

from __future__ import annotations

import os
import re
from typing import Any

from pydantic import BaseModel, Field, field_validator


def resolve_env_vars(value: str) -> str:
    pattern = r'\$\{(\w+)(?::([^}]*))?\}'

    def replacer(match):
        var_name = match.group(1)
        default_value = match.group(2) or ""
        return os.environ.get(var_name, default_value)

    return re.sub(pattern, replacer, value)


class DirectoriesConfig(BaseModel):
    game_storage_dir: str = "game_storage"


class GameSettingsConfig(BaseModel):
    default_answer_count: int = 400
    round_count: int = 4


class ScoringConfig(BaseModel):
    # Stored ranks run past the scoring domain (seeds to 400, AI ranks to 500).
    rank_ceiling: int = 200


class GenerationConfig(BaseModel):
    min_answers: int = 350
    max_answers: int = 400
    max_rank: int = 400
    max_tokens: int = 16384
    temperature: float = 0.7


class GameConfig(BaseModel):
    directories: DirectoriesConfig = Field(default_factory=DirectoriesConfig)
    game: GameSettingsConfig = Field(default_factory=GameSettingsConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)


class OllamaConfig(BaseModel):
    base_url: str = "http://localhost:11434"
    api_key: str = ""
    llm_model_name: str = "qwen2.5:7b"
    default_temperature: float = 0.7
    max_tokens: int = 2048

    @field_validator("base_url", "api_key", mode="before")
    @classmethod
    def resolve_env(cls, v: Any) -> str:
        if isinstance(v, str):
            return resolve_env_vars(v)
        return v


class APIConfig(BaseModel):
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    llm_model_name: str = "gpt-4o-mini"
    default_temperature: float = 0.7
    max_tokens: int = 2048
    use_langchain: bool = True

    @field_validator("base_url", "api_key", mode="before")
    @classmethod
    def resolve_env(cls, v: Any) -> str:
        if isinstance(v, str):
            return resolve_env_vars(v)
        return v


class ModelsConfig(BaseModel):
    provider: str = "ollama"
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    def get_active_config(self) -> OllamaConfig | APIConfig:
        if self.provider == "ollama":
            return self.ollama
        return self.api


class JudgeConfig(BaseModel):
    max_ai_rank: int = 500
    timeout_seconds: float = 15.0
    temperature: float = 0.0
    max_tokens: int = 100


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_game_events: bool = True


class AgentsConfig(BaseModel):
    judge: JudgeConfig = Field(default_factory=JudgeConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
