"""Retriever interface — depends only on engine.models."""

from __future__ import annotations

from abc import ABC, abstractmethod

from context_agent.engine.models import IndexStats, RetrievedChunk


class Retriever(ABC):
    """Async top-K retrieval interface.

    Swap to a real vector database by implementing this ABC.
    """

    @abstractmethod
    async def ensure_initialized(self) -> None: ...

    @abstractmethod
    async def query(self, text: str, k: int = 3) -> list[RetrievedChunk]: ...

    @abstractmethod
    def stats(self) -> IndexStats: ...
