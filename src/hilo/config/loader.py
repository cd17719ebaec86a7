"""Reads the YAML files under config/ into their pydantic models."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel

from hilo.config.models import AgentsConfig, GameConfig, ModelsConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"

CONFIG_FILES: Dict[type, str] = {
    GameConfig: "game.yaml",
    ModelsConfig: "models.yaml",
    AgentsConfig: "agents.yaml",
}

ConfigT = TypeVar("ConfigT", bound=BaseModel)


class ConfigLoader:
    def __init__(self, config_dir: Optional[str | Path] = None):
        self.config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR

    def load(self, model: Type[ConfigT]) -> ConfigT:
        """Validate one config file; a missing or empty file yields the model defaults."""
        path = self.config_dir / CONFIG_FILES[model]
        if not path.exists():
            logger.warning("Config file not found: %s, using defaults", path)
            return model()

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        logger.info("Loaded %s from %s", model.__name__, path)
        return model.model_validate(data)

    def load_game_config(self) -> GameConfig:
        return self.load(GameConfig)

    def load_models_config(self) -> ModelsConfig:
        return self.load(ModelsConfig)

    def load_agents_config(self) -> AgentsConfig:
        return self.load(AgentsConfig)
