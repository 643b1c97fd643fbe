"""Convert documents into chat-style fine-tuning JSONL and validate it."""

from .chunking import ChunkingError, TextChunker, chunk_text, split_segments
from .config import ConversionSettings, resolve_settings
from .pipeline import ConversionError, ConversionPipeline, create_pipeline
from .records import build_record, build_records, drafts_to_records, pad_records
from .schema_validation import validate_jsonl, validate_jsonl_file
from .types import (
    ConversionResult,
    FormatType,
    Message,
    TextSegment,
    TrainingDraft,
    TrainingRecord,
    ValidationError,
    ValidationResult,
)

__version__ = "0.1.0"

__all__ = [
    "ChunkingError",
    "TextChunker",
    "chunk_text",
    "split_segments",
    "ConversionSettings",
    "resolve_settings",
    "ConversionError",
    "ConversionPipeline",
    "create_pipeline",
    "build_record",
    "build_records",
    "drafts_to_records",
    "pad_records",
    "validate_jsonl",
    "validate_jsonl_file",
    "ConversionResult",
    "FormatType",
    "Message",
    "TextSegment",
    "TrainingDraft",
    "TrainingRecord",
    "ValidationError",
    "ValidationResult",
]
