"""Model provider abstractions for LLM clients."""

from hilo.models.api_client import APILLMClient
from hilo.models.base import LLMClient
from hilo.models.langchain_client import (
    LangChainLLMClient,
    create_ollama_llm_client,
    create_openai_llm_client,
)
from hilo.models.registry import ModelProviderRegistry

__all__ = [
    "APILLMClient",
    "LLMClient",
    "LangChainLLMClient",
    "create_ollama_llm_client",
    "create_openai_llm_client",
    "ModelProviderRegistry",
]
