"""Configuration module for the Hi-Lo game engine."""

from hilo.config.loader import ConfigLoader
from hilo.config.models import (
    AgentsConfig,
    APIConfig,
    DirectoriesConfig,
    GameConfig,
    GameSettingsConfig,
    GenerationConfig,
    JudgeConfig,
    ModelsConfig,
    ObservabilityConfig,
    OllamaConfig,
    ScoringConfig,
)

__all__ = [
    "ConfigLoader",
    "AgentsConfig",
    "APIConfig",
    "DirectoriesConfig",
    "GameConfig",
    "GameSettingsConfig",
    "GenerationConfig",
    "JudgeConfig",
    "ModelsConfig",
    "ObservabilityConfig",
    "OllamaConfig",
    "ScoringConfig",
]
