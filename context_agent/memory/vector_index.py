"""Linear-scan cosine similarity index over embedded chunks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from context_agent.engine.models import Chunk, IndexStats, RetrievedChunk
from context_agent.errors import EmbeddingError
from context_agent.memory.chunking import chunk_text
from context_agent.memory.embeddings import EmbeddingProvider
from context_agent.memory.interface import Retriever

if TYPE_CHECKING:
    from context_agent.memory.ingest import DocumentIngestor

logger = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 300
MIN_CHUNK_LENGTH = 50


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """``dot(a, b) / (|a| * |b|)``; 0.0 when either vector has zero norm."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Dimension mismatch: {va.shape} vs {vb.shape}")
    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb)) / denom


class SimilarityIndex(Retriever):
    """Ordered list of chunks answering top-K cosine queries.

    Cost is O(n * d) per query, so this is meant for small corpora only.

    Initialization is lazy and single-flight: the first caller of
    :meth:`ensure_initialized` starts one loader task, every concurrent
    caller awaits that same task. A failed load is not retried.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        ingestor: DocumentIngestor | None = None,
        *,
        max_chunk_size: int = MAX_CHUNK_SIZE,
        min_chunk_length: int = MIN_CHUNK_LENGTH,
        embed_delay: float = 0.0,
    ) -> None:
        self._embedder = embedder
        self._ingestor = ingestor
        self._max_chunk_size = max_chunk_size
        self._min_chunk_length = min_chunk_length
        self._embed_delay = embed_delay
        self._chunks: list[Chunk] = []
        self._init_task: asyncio.Task[None] | None = None
        self._initialized = False

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return tuple(self._chunks)

    @property
    def embed_delay(self) -> float:
        return self._embed_delay

    # -- initialization -----------------------------------------------------

    async def ensure_initialized(self) -> None:
        if self._initialized:
            return
        if self._init_task is None:
            self._init_task = asyncio.create_task(self._initialize())
        # shield: a cancelled caller must not cancel the shared load
        await asyncio.shield(self._init_task)

    async def _initialize(self) -> None:
        logger.info("Initializing similarity index...")
        if self._ingestor is not None:
            await self._ingestor.load(self)
        self._initialized = True
        logger.info("Similarity index initialized with %d chunks", len(self._chunks))

    # -- ingestion ----------------------------------------------------------

    def add(self, chunk: Chunk) -> None:
        self._chunks.append(chunk)

    async def ingest(self, text: str, source: str) -> int:
        """Chunk, embed and store ``text``. Returns the number of chunks added.

        A chunk whose embedding fails is logged and skipped.
        """
        added = 0
        for i, piece in enumerate(chunk_text(text, self._max_chunk_size)):
            if len(piece.strip()) < self._min_chunk_length:
                continue
            try:
                embedding = await self._embedder.embed(piece)
            except EmbeddingError as exc:
                logger.error("Error embedding chunk %d from %s: %s", i, source, exc)
                continue

            self.add(Chunk(
                id=f"{source}_chunk_{i}",
                content=piece,
                embedding=embedding,
                source=source,
                chunk_index=i,
            ))
            added += 1
            if self._embed_delay > 0:
                await asyncio.sleep(self._embed_delay)
        return added

    # -- query --------------------------------------------------------------

    async def query(self, text: str, k: int = 3) -> list[RetrievedChunk]:
        await self.ensure_initialized()

        if not self._chunks:
            logger.warning("No chunks available for similarity search")
            return []
        if k <= 0:
            return []

        query_embedding = await self._embedder.embed(text)
        scored = [
            (cosine_similarity(query_embedding, chunk.embedding), chunk)
            for chunk in self._chunks
        ]
        # list.sort is stable, so equal scores keep insertion order
        scored.sort(key=lambda pair: pair[0], reverse=True)

        top = scored[:k]
        logger.info("Retrieved %d chunks for query: %r", len(top), text[:80])
        return [
            RetrievedChunk(
                id=chunk.id,
                content=chunk.content,
                source=chunk.source,
                chunk_index=chunk.chunk_index,
                score=score,
            )
            for score, chunk in top
        ]

    def stats(self) -> IndexStats:
        sources = list(dict.fromkeys(c.source for c in self._chunks))
        return IndexStats(
            total_chunks=len(self._chunks),
            sources=sources,
            initialized=self._initialized,
        )
