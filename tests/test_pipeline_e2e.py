"""End-to-end tests for the conversion pipeline."""

import json
from pathlib import Path

import pytest

from tuneprep.config import ConversionSettings
from tuneprep.pipeline import ConversionError, ConversionPipeline, create_pipeline
from tuneprep.schema_validation import validate_jsonl_file

PARAGRAPH = (
    "Rivers carry water from highlands to the sea. "
    "They shape valleys over thousands of years. "
    "Floodplains form where rivers deposit sediment.\n"
)


def write_document(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


def test_pipeline_creation():
    """Test pipeline creation."""
    pipeline = create_pipeline(overrides={"chunk_size": 300, "chunk_overlap": 30}, use_env=False)

    assert pipeline.settings.chunk_size == 300
    assert pipeline.chunker.chunk_size == 300
    assert pipeline.chunker.chunk_overlap == 30


def test_convert_text():
    """Text is chunked and each long chunk becomes a record."""
    pipeline = ConversionPipeline(ConversionSettings(chunk_size=200, chunk_overlap=20))
    result = pipeline.convert_text(PARAGRAPH * 10, source="rivers")

    assert result.success
    assert result.file_path == "rivers"
    assert result.chunks_created > 1
    assert result.records_created == len(result.records)
    assert result.records_created + result.skipped_chunks == result.chunks_created


def test_convert_empty_text():
    """Whitespace-only documents fail without raising."""
    result = ConversionPipeline().convert_text("   \n\t ")

    assert not result.success
    assert result.error_message == "File appears to be empty"


def test_convert_file_unsupported(tmp_path):
    """Binary formats are reported as failed results."""
    path = write_document(tmp_path, "report.pdf", "%PDF-1.4")
    result = ConversionPipeline().convert_file(path)

    assert not result.success
    assert ".pdf" in result.error_message


def test_convert_files_pads_and_validates(tmp_path):
    """A small batch is padded to ten records and passes validation."""
    doc = write_document(tmp_path, "rivers.md", PARAGRAPH * 3)
    pipeline = ConversionPipeline(ConversionSettings(
        chunk_size=1000, chunk_overlap=100, system_instructions="You are a geography tutor."
    ))

    results, records = pipeline.convert_files([doc])

    assert len(results) == 1
    assert results[0].records_created == 1
    assert len(records) == 10
    assert records[-1].messages[1].content == "Hello"
    assert pipeline.check_output(records).valid


def test_bad_file_does_not_stop_batch(tmp_path):
    """One failing document is captured and the rest still convert."""
    good = write_document(tmp_path, "good.txt", PARAGRAPH * 20)
    missing = tmp_path / "missing.txt"
    binary = write_document(tmp_path, "old.doc", "binary")

    pipeline = ConversionPipeline(ConversionSettings(chunk_size=200, chunk_overlap=20))
    results, records = pipeline.convert_files([missing, good, binary])

    assert [r.success for r in results] == [False, True, False]
    assert len(records) >= 10

    stats = pipeline.get_stats(results)
    assert stats["files_processed"] == 3
    assert stats["files_converted"] == 1


def test_no_content_raises(tmp_path):
    """A batch without any record is an error."""
    empty = write_document(tmp_path, "empty.txt", "  \n ")
    short = write_document(tmp_path, "short.txt", "Too short to train on.")

    with pytest.raises(ConversionError, match="No valid content"):
        ConversionPipeline().convert_files([empty, short])


def test_write_jsonl(tmp_path):
    """Written files are one record per line and validate."""
    doc = write_document(tmp_path, "rivers.txt", PARAGRAPH * 40)
    pipeline = ConversionPipeline(ConversionSettings(chunk_size=300, chunk_overlap=50, format_type="qa"))

    _, records = pipeline.convert_files([doc])
    output = pipeline.write_jsonl(records, tmp_path / "out" / "train.jsonl")

    lines = output.read_text(encoding="utf-8").split("\n")
    assert len(lines) == len(records)
    assert all("messages" in json.loads(line) for line in lines)
    assert validate_jsonl_file(output).valid
