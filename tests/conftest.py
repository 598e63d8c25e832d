"""Shared fixtures for context_agent tests."""

from __future__ import annotations

import re

import pytest

from context_agent import create_dispatcher
from context_agent.engine.session import InMemorySessionMemory
from context_agent.errors import EmbeddingError
from context_agent.memory.embeddings import EmbeddingProvider
from context_agent.memory.vector_index import SimilarityIndex
from context_agent.tools.weather import MockWeatherProvider

VOCABULARY = [
    "paris", "france", "capital", "berlin", "germany", "tokyo", "japan",
    "weather", "rain", "gpu", "memory", "python", "city", "river",
]


class KeywordEmbedder(EmbeddingProvider):
    """Deterministic embedding: one dimension per vocabulary word.

    Words outside the vocabulary are ignored; ``fail_on`` makes any text
    containing that substring raise EmbeddingError.
    """

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise EmbeddingError("provider unavailable")
        words = re.findall(r"[a-z]+", text.lower())
        return [float(words.count(w)) for w in VOCABULARY]


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def index(embedder):
    return SimilarityIndex(embedder)


@pytest.fixture
def session_memory():
    return InMemorySessionMemory()


@pytest.fixture
def dispatcher():
    return create_dispatcher(MockWeatherProvider(seed=42))


@pytest.fixture
def corpus_dir(tmp_path):
    docs = tmp_path / "documents"
    docs.mkdir()
    (docs / "france.md").write_text(
        "Paris is the capital of France, a city on the river Seine.\n\n"
        "France borders Germany, Spain, Italy, Belgium and Switzerland.",
        encoding="utf-8",
    )
    (docs / "japan.txt").write_text(
        "Tokyo is the capital of Japan and a very large city by population.",
        encoding="utf-8",
    )
    (docs / "empty.txt").write_text("   \n", encoding="utf-8")
    (docs / "image.png").write_bytes(b"\x89PNG")
    return docs
