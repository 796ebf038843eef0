"""Text chunking logic for Markdown documentation."""

from __future__ import annotations

import functools
import logging
import re
from typing import Callable, Dict, List

import tiktoken

from .errors import InvalidInput
from .models import Document

logger = logging.getLogger(__name__)

DEFAULT_MIN_CHUNK_SIZE = 800
DEFAULT_MAX_CHUNK_SIZE = 8000

# A Markdown ATX header: 1-6 '#' followed by a space and some text.
HEADER_RE = re.compile(r"^#{1,6}[ \t]+\S.*$", re.MULTILINE)
PARAGRAPH_RE = re.compile(r"\n[ \t]*\n\s*")

PARAGRAPH_SEPARATOR = "\n\n"


@functools.lru_cache(maxsize=1)
def _get_encoder():
    # cl100k_base is compatible with most modern models
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str) -> int:
    """Count tokens in text using tiktoken.

    Args:
        text: Text to count tokens for

    Returns:
        Number of tokens
    """
    return len(_get_encoder().encode(text))


LENGTH_UNITS: Dict[str, Callable[[str], int]] = {
    "chars": len,
    "tokens": count_tokens,
}


def get_length_fn(unit: str) -> Callable[[str], int]:
    try:
        return LENGTH_UNITS[unit.strip().lower()]
    except KeyError:
        raise InvalidInput(
            f"Unknown chunk length unit {unit!r}, expected one of {sorted(LENGTH_UNITS)}"
        ) from None


# -----------------------------------------------------------------------------
# Interfaces
# -----------------------------------------------------------------------------

class Chunker:
    """Abstract base class for document chunking."""

    def split(self, document: Document) -> List[str]:
        """Split a document into ordered, trimmed, non-empty chunks."""
        raise NotImplementedError


class MarkdownChunker(Chunker):
    """Section-aware chunker bounded by a minimum and maximum size.

    Sections are delimited by Markdown headers. Small sections are merged
    into the preceding chunk when the result still fits; oversized sections
    are re-packed paragraph by paragraph.
    """

    def __init__(
        self,
        min_size: int = DEFAULT_MIN_CHUNK_SIZE,
        max_size: int = DEFAULT_MAX_CHUNK_SIZE,
        length_unit: str = "chars",
    ):
        if min_size < 0 or min_size >= max_size:
            raise InvalidInput(
                f"Chunk bounds must satisfy 0 <= min < max, got min={min_size} max={max_size}"
            )
        self.min_size = min_size
        self.max_size = max_size
        self.length_unit = length_unit
        self.measure = get_length_fn(length_unit)

    def split(self, document: Document) -> List[str]:
        chunks: List[str] = []

        for section in HEADER_RE.split(document.content):
            section = section.strip()
            if not section:
                continue

            size = self.measure(section)
            if size > self.max_size:
                chunks.extend(self._split_paragraphs(section, document.path))
            elif size >= self.min_size:
                chunks.append(section)
            else:
                self._merge_small(chunks, section)

        logger.debug(f"Document {document.path}: {len(chunks)} chunks")
        return chunks

    def _merge_small(self, chunks: List[str], section: str) -> None:
        if chunks:
            merged = chunks[-1] + PARAGRAPH_SEPARATOR + section
            if self.measure(merged) <= self.max_size:
                chunks[-1] = merged
                return
        chunks.append(section)

    def _split_paragraphs(self, section: str, path: str) -> List[str]:
        out: List[str] = []
        buffer = ""

        for paragraph in PARAGRAPH_RE.split(section):
            paragraph = paragraph.strip()
            if not paragraph:
                continue

            candidate = buffer + PARAGRAPH_SEPARATOR + paragraph if buffer else paragraph
            if self.measure(candidate) <= self.max_size:
                buffer = candidate
                continue

            self._flush(buffer, out, path)
            buffer = paragraph

        self._flush(buffer, out, path)
        return out

    def _flush(self, buffer: str, out: List[str], path: str) -> None:
        if not buffer:
            return
        if self.measure(buffer) >= self.min_size:
            out.append(buffer)
        else:
            logger.debug(
                f"Document {path}: dropping undersized paragraph run "
                f"({self.measure(buffer)} < {self.min_size} {self.length_unit})"
            )


def split_into_chunks(
    document: Document,
    min_size: int = DEFAULT_MIN_CHUNK_SIZE,
    max_size: int = DEFAULT_MAX_CHUNK_SIZE,
    length_unit: str = "chars",
) -> List[str]:
    """Split a document into chunks (Functional Wrapper)."""
    chunker = MarkdownChunker(min_size=min_size, max_size=max_size, length_unit=length_unit)
    return chunker.split(document)


def make_chunker(cfg: Dict) -> MarkdownChunker:
    return MarkdownChunker(
        min_size=int(cfg.get("min_chunk_size", DEFAULT_MIN_CHUNK_SIZE)),
        max_size=int(cfg.get("max_chunk_size", DEFAULT_MAX_CHUNK_SIZE)),
        length_unit=str(cfg.get("chunk_length_unit", "chars")),
    )
