"""Embedding providers."""

from __future__ import annotations

import hashlib
import logging
import re
from abc import ABC, abstractmethod

import numpy as np

from context_agent.errors import EmbeddingError

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"[a-z0-9]+")


class EmbeddingProvider(ABC):
    """Converts text into a fixed-length vector.

    Implementations raise :class:`EmbeddingError` on any provider or
    transport failure so callers only need to handle one exception type.
    """

    @abstractmethod
    async def embed(self, text: str) -> list[float]: ...


# ---------------------------------------------------------------------------
# OpenAI (or any OpenAI-compatible endpoint, e.g. Gemini)
# ---------------------------------------------------------------------------

class OpenAIEmbeddingProvider(EmbeddingProvider):
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
    ) -> None:
        # Late import so the rest of the package works without openai installed
        import openai

        self._openai = openai
        self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(model=self._model, input=text)
        except self._openai.OpenAIError as exc:
            logger.error("Embedding request failed (%s): %s", type(exc).__name__, exc)
            raise EmbeddingError(f"Embedding generation failed: {type(exc).__name__}") from exc

        if not response.data:
            raise EmbeddingError("Embedding response contained no vectors")
        return [float(x) for x in response.data[0].embedding]


# ---------------------------------------------------------------------------
# Offline hashing embedder (demo mode)
# ---------------------------------------------------------------------------

class HashingEmbeddingProvider(EmbeddingProvider):
    """Bag-of-words feature hashing into ``dimensions`` buckets, L2-normalised.

    Texts sharing words end up close in cosine space, which is enough to
    demo retrieval offline. Text with no tokens maps to the zero vector.
    """

    def __init__(self, dimensions: int = 256) -> None:
        if dimensions < 1:
            raise ValueError("dimensions must be >= 1")
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _bucket(self, token: str) -> int:
        digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big") % self._dimensions

    async def embed(self, text: str) -> list[float]:
        vec = np.zeros(self._dimensions, dtype=np.float64)
        for token in _TOKEN.findall(text.lower()):
            vec[self._bucket(token)] += 1.0
        norm = np.linalg.norm(vec)
        if norm > 0:
            vec /= norm
        return vec.tolist()
