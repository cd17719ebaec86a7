"""Base interface for model providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class LLMClient(ABC):
    @abstractmethod
    async def agenerate(self, prompt: str) -> str:
        ...
