"""Corpus loader: reads a documents directory into a SimilarityIndex."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from context_agent.errors import CorpusNotFoundError

if TYPE_CHECKING:
    from context_agent.memory.vector_index import SimilarityIndex

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({".md", ".txt", ".json", ".csv"})


class DocumentIngestor:
    """Loads every supported text file in ``documents_dir`` (non-recursive).

    A missing directory is fatal. Empty or unreadable files are logged and
    skipped without aborting the rest of the corpus.
    """

    def __init__(self, documents_dir: str | Path) -> None:
        self._dir = Path(documents_dir)

    @property
    def documents_dir(self) -> Path:
        return self._dir

    def list_files(self) -> list[Path]:
        if not self._dir.is_dir():
            raise CorpusNotFoundError(f"Documents folder not found at: {self._dir}")
        return sorted(
            p for p in self._dir.iterdir()
            if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
        )

    async def load(self, index: SimilarityIndex) -> int:
        """Ingest the corpus into ``index``. Returns the number of chunks added."""
        files = self.list_files()
        if not files:
            logger.warning("No readable files found in %s", self._dir)
            return 0

        logger.info("Found %d files to process: %s", len(files), [p.name for p in files])

        total = 0
        for path in files:
            try:
                content = await asyncio.to_thread(path.read_text, encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Error reading file %s: %s", path.name, exc)
                continue

            if not content.strip():
                logger.warning("Skipping empty file: %s", path.name)
                continue

            added = await index.ingest(content, path.name)
            logger.info("Processed %s (%d chunks)", path.name, added)
            total += added
        return total
