"""Tests for chunking functionality."""

import pytest

from tuneprep.chunking import ChunkingError, TextChunker, chunk_text, split_segments


def test_chunker_initialization():
    """Test chunker initialization."""
    chunker = TextChunker(chunk_size=500, chunk_overlap=50)
    assert chunker.chunk_size == 500
    assert chunker.chunk_overlap == 50


def test_short_text_returned_unchanged():
    """Text that fits in one chunk comes back untouched, whitespace included."""
    text = "  Short text with padding.  \n"
    assert chunk_text(text, 100, 10) == [text]
    assert chunk_text("", 10, 0) == [""]


def test_text_exactly_chunk_size():
    """Text of exactly chunk_size characters is a single chunk."""
    text = "x" * 20
    assert chunk_text(text, 20, 5) == [text]


def test_breaks_at_period_past_midpoint():
    """A chunk ends at the last period when it lies past the window midpoint."""
    text = "AAAA. BBBB. CCCC."
    chunks = chunk_text(text, 14, 2)

    assert chunks[0] == "AAAA. BBBB."
    assert chunks[1] == "CCCC."


def test_breaks_at_newline():
    """Line breaks count as natural break points."""
    text = "first line here\nsecond line here\nthird"
    chunks = chunk_text(text, 20, 5)

    assert chunks == ["first line here", "second line here", "third"]


def test_ignores_break_before_midpoint():
    """A period in the first half of the window is not used as a break."""
    text = "AB. " + "c" * 30
    chunks = chunk_text(text, 20, 5)

    assert chunks[0] == text[:20].strip()


def test_fixed_width_overlap():
    """Without natural breaks consecutive chunks share chunk_overlap characters."""
    text = "".join(chr(ord("a") + i % 26) for i in range(100))
    chunk_size, overlap = 30, 10
    chunks = chunk_text(text, chunk_size, overlap)

    assert chunks[0] == text[:30]
    assert chunks[1] == text[20:50]
    for previous, current in zip(chunks, chunks[1:]):
        assert previous[-overlap:] == current[:overlap]


def test_chunks_are_trimmed_and_non_empty():
    """Every emitted chunk is stripped and non-empty."""
    text = ("Sentence number one is here.   \n\n   " * 30) + "   \n\n   "
    chunks = chunk_text(text, 50, 10)

    assert chunks
    for chunk in chunks:
        assert chunk
        assert chunk == chunk.strip()


def test_whitespace_runs_dropped():
    """Windows that are only whitespace produce no chunk."""
    text = "Start." + " " * 200 + "End of the document."
    chunks = chunk_text(text, 40, 5)

    assert "" not in chunks
    assert chunks[0] == "Start."
    assert chunks[-1].endswith("document.")


def test_deterministic():
    """Identical inputs give identical output."""
    text = "The quick brown fox. Jumps over the lazy dog.\n" * 40
    assert chunk_text(text, 120, 30) == chunk_text(text, 120, 30)


def test_segment_offsets_map_to_source():
    """Segment offsets point at the segment text in the source."""
    text = "  Alpha beta gamma. Delta epsilon zeta.\n  Eta theta iota kappa. " * 10
    segments = split_segments(text, 60, 15)

    assert len(segments) > 1
    for segment in segments:
        assert text[segment.start:segment.end] == segment.text
        assert segment.text == segment.text.strip()


def test_segments_match_chunks():
    """Segments and chunks agree for text longer than one chunk."""
    text = "One sentence here. Another sentence there.\n" * 20
    chunker = TextChunker(chunk_size=100, chunk_overlap=20)

    assert [s.text for s in chunker.segments(text)] == chunker.chunk(text)


@pytest.mark.parametrize("chunk_size,chunk_overlap", [
    (0, 0),
    (-5, 0),
    (10, 10),
    (10, 20),
    (10, -1),
])
def test_invalid_parameters(chunk_size, chunk_overlap):
    """Degenerate size/overlap combinations fail fast."""
    with pytest.raises(ChunkingError):
        chunk_text("some text " * 10, chunk_size, chunk_overlap)


def test_invalid_parameters_rejected_for_short_text():
    """Parameters are checked even when the text fits in one chunk."""
    with pytest.raises(ChunkingError):
        chunk_text("short", 10, 10)


def test_non_integer_parameters():
    """Sizes must be integers."""
    with pytest.raises(ChunkingError):
        TextChunker(chunk_size=10.5, chunk_overlap=1)


def test_chunking_error_is_value_error():
    """ChunkingError can be caught as ValueError."""
    with pytest.raises(ValueError):
        TextChunker(chunk_size=5, chunk_overlap=5)


def test_large_overlap_terminates():
    """An overlap just below chunk_size still makes progress."""
    text = "x" * 500
    chunks = chunk_text(text, 10, 9)

    assert len(chunks) == 491
    assert all(len(c) == 10 for c in chunks)
