"""Model provider registry for managing LLM clients."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from hilo.config import ConfigLoader, ModelsConfig
from hilo.models.api_client import APILLMClient
from hilo.models.base import LLMClient
from hilo.models.langchain_client import (
    create_ollama_llm_client,
    create_openai_llm_client,
)

logger = logging.getLogger(__name__)


class ModelProviderRegistry:
    def __init__(self, config: Optional[ModelsConfig] = None):
        if config is None:
            loader = ConfigLoader()
            config = loader.load_models_config()
        self._config = config
        self._clients: Dict[Tuple[Optional[float], Optional[int]], LLMClient] = {}

    @property
    def provider(self) -> str:
        return self._config.provider

    def get_llm_client(
        self,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMClient:
        """Return a cached client, one per (temperature, max_tokens) override."""
        key = (temperature, max_tokens)
        if key in self._clients:
            return self._clients[key]

        client = self._create_llm_client(temperature, max_tokens)
        self._clients[key] = client
        return client

    def _create_llm_client(
        self,
        temperature: Optional[float],
        max_tokens: Optional[int],
    ) -> LLMClient:
        cfg = self._config.get_active_config()
        temperature = cfg.default_temperature if temperature is None else temperature
        max_tokens = cfg.max_tokens if max_tokens is None else max_tokens

        if self._config.provider == "ollama":
            client: LLMClient = create_ollama_llm_client(
                base_url=cfg.base_url,
                model_name=cfg.llm_model_name,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        elif self._config.api.use_langchain:
            client = create_openai_llm_client(
                base_url=cfg.base_url,
                api_key=cfg.api_key,
                model_name=cfg.llm_model_name,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        else:
            client = APILLMClient(
                base_url=cfg.base_url,
                api_key=cfg.api_key,
                model_name=cfg.llm_model_name,
                temperature=temperature,
                max_tokens=max_tokens,
            )

        logger.info(
            "Initialized LLM client: provider=%s, model=%s, temperature=%s, max_tokens=%s",
            self._config.provider,
            cfg.llm_model_name,
            temperature,
            max_tokens,
        )
        return client
