"""LangChain-based LLM clients."""

from __future__ import annotations

import logging

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from hilo.models.base import LLMClient

logger = logging.getLogger(__name__)


class LangChainLLMClient(LLMClient):
    """Wraps a chat model whose sampling settings were fixed at construction."""

    def __init__(self, chat_model: BaseChatModel):
        self._chat_model = chat_model

    @property
    def chat_model(self) -> BaseChatModel:
        return self._chat_model

    async def agenerate(self, prompt: str) -> str:
        messages = [HumanMessage(content=prompt)]
        response = await self._chat_model.ainvoke(messages)
        return str(response.content)


def create_ollama_llm_client(
    base_url: str = "http://localhost:11434",
    model_name: str = "qwen2.5:7b",
    temperature: float = 0.7,
    max_tokens: int = 2048,
    **kwargs,
) -> LangChainLLMClient:
    from langchain_ollama import ChatOllama

    chat_model = ChatOllama(
        base_url=base_url,
        model=model_name,
        temperature=temperature,
        num_predict=max_tokens,
        **kwargs,
    )
    return LangChainLLMClient(chat_model)


def create_openai_llm_client(
    base_url: str = "https://api.openai.com/v1",
    api_key: str = "",
    model_name: str = "gpt-4o-mini",
    temperature: float = 0.7,
    max_tokens: int = 2048,
    timeout: float = 120.0,
    **kwargs,
) -> LangChainLLMClient:
    from langchain_openai import ChatOpenAI

    chat_model = ChatOpenAI(
        base_url=base_url,
        api_key=api_key or None,
        model=model_name,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
        **kwargs,
    )
    return LangChainLLMClient(chat_model)
