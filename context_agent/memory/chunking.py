"""Paragraph/sentence chunker with greedy packing."""

from __future__ import annotations

import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SENTENCE_END = re.compile(r"[.!?]+")

PARAGRAPH_JOINER = "\n\n"
SENTENCE_JOINER = ". "


def split_units(text: str) -> list[str]:
    """Split on blank lines, or on single newlines if there are no paragraphs."""
    units = [p for p in _PARAGRAPH_BREAK.split(text) if p.strip()]
    if len(units) == 1:
        units = [line for line in text.split("\n") if line.strip()]
    return units


def chunk_text(text: str, max_chunk_size: int = 300) -> list[str]:
    """Greedily pack paragraphs (or sentences of long paragraphs) into chunks.

    ``max_chunk_size`` is a packing target rather than a hard cap: a single
    sentence longer than the target is emitted as its own chunk untruncated.
    """
    chunks: list[str] = []
    current = ""

    for unit in split_units(text):
        if len(unit) > max_chunk_size:
            if current:
                chunks.append(current.strip())
                current = ""

            sentences = [s for s in _SENTENCE_END.split(unit) if s.strip()]
            for sentence in sentences:
                if current and len(current) + len(sentence) > max_chunk_size:
                    chunks.append(current.strip())
                    current = sentence.strip()
                else:
                    current += (SENTENCE_JOINER if current else "") + sentence.strip()
        else:
            if current and len(current) + len(unit) > max_chunk_size:
                chunks.append(current.strip())
                current = unit
            else:
                current += (PARAGRAPH_JOINER if current else "") + unit

    if current.strip():
        chunks.append(current.strip())

    return [c for c in chunks if c]
