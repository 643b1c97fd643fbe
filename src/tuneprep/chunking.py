"""Sentence-aware, character-bounded chunking of document text."""

import logging
from typing import List

from .types import TextSegment

logger = logging.getLogger(__name__)

# A natural break is only taken when it lies past this fraction of the window.
BREAK_THRESHOLD = 0.5


class ChunkingError(ValueError):
    """Invalid chunking parameters."""
    pass


def _check_parameters(chunk_size: int, chunk_overlap: int) -> None:
    for name, value in (("chunk_size", chunk_size), ("chunk_overlap", chunk_overlap)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ChunkingError(f"{name} must be an integer, got {type(value).__name__}")
    if chunk_size <= 0:
        raise ChunkingError(f"chunk_size must be positive, got {chunk_size}")
    if chunk_overlap < 0:
        raise ChunkingError(f"chunk_overlap must not be negative, got {chunk_overlap}")
    if chunk_overlap >= chunk_size:
        raise ChunkingError(
            f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})"
        )


def split_segments(text: str, chunk_size: int, chunk_overlap: int) -> List[TextSegment]:
    """
    Split text into trimmed segments that remember where they came from.

    Each window of ``chunk_size`` characters is cut back to its last period or
    line break when that break lies past the middle of the window. Windows
    without such a break are emitted whole and the next window starts
    ``chunk_size - chunk_overlap`` characters later, so consecutive windows
    share ``chunk_overlap`` characters.

    Args:
        text: Document text
        chunk_size: Maximum characters per window
        chunk_overlap: Characters shared by consecutive windows cut without a break

    Returns:
        Non-empty segments in document order

    Raises:
        ChunkingError: If the size/overlap combination cannot make progress
    """
    _check_parameters(chunk_size, chunk_overlap)

    segments = []
    length = len(text)
    step = chunk_size - chunk_overlap
    start = 0

    while start < length:
        end = min(start + chunk_size, length)

        if end < length:
            window = text[start:end]
            break_point = max(window.rfind("."), window.rfind("\n"))

            if break_point > chunk_size * BREAK_THRESHOLD:
                end = start + break_point + 1
                next_start = end
            else:
                next_start = start + step
        else:
            next_start = length

        piece = text[start:end]
        stripped = piece.strip()
        if stripped:
            offset = start + (len(piece) - len(piece.lstrip()))
            segments.append(TextSegment(text=stripped, start=offset, end=offset + len(stripped)))

        start = next_start

    logger.debug("Split %d characters into %d segments", length, len(segments))
    return segments


def chunk_text(text: str, chunk_size: int, chunk_overlap: int) -> List[str]:
    """
    Split text into bounded, slightly overlapping chunks.

    Text that already fits in one chunk is returned untouched as the only
    element. Otherwise see :func:`split_segments`.
    """
    _check_parameters(chunk_size, chunk_overlap)

    if len(text) <= chunk_size:
        return [text]

    return [segment.text for segment in split_segments(text, chunk_size, chunk_overlap)]


class TextChunker:
    """Chunks document text with a fixed size and overlap."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        """
        Initialize chunker.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters shared by consecutive fixed-width chunks
        """
        _check_parameters(chunk_size, chunk_overlap)
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk(self, text: str) -> List[str]:
        """Chunk text into strings."""
        return chunk_text(text, self.chunk_size, self.chunk_overlap)

    def segments(self, text: str) -> List[TextSegment]:
        """Chunk text into segments with source offsets."""
        return split_segments(text, self.chunk_size, self.chunk_overlap)
