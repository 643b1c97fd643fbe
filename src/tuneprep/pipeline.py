"""Orchestration pipeline for converting documents into fine-tuning files."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .chunking import TextChunker
from .config import ConversionSettings, resolve_settings
from .extraction import extract_text
from .io_utils import records_to_jsonl, save_records
from .records import build_records, pad_records
from .schema_validation import validate_jsonl
from .types import ConversionResult, TrainingRecord, ValidationResult

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """No usable training records could be produced."""
    pass


class ConversionPipeline:
    """Converts documents into padded, validated chat training records."""

    def __init__(self, settings: Optional[ConversionSettings] = None):
        """
        Initialize pipeline.

        Args:
            settings: Conversion settings (defaults if None)
        """
        self.settings = settings or ConversionSettings()
        self.chunker = TextChunker(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap
        )

    def convert_text(self, text: str, source: str = "<text>") -> ConversionResult:
        """
        Convert already extracted text into records.

        Args:
            text: Document text
            source: Name reported in the result

        Returns:
            Conversion result for this document
        """
        if not text.strip():
            logger.warning("File %s appears to be empty", source)
            return ConversionResult(
                file_path=source,
                success=False,
                error_message="File appears to be empty"
            )

        chunks = self.chunker.chunk(text)
        records, skipped = build_records(
            chunks,
            format_type=self.settings.format_type,
            system_instructions=self.settings.system_instructions,
            min_chunk_chars=self.settings.min_chunk_chars
        )

        return ConversionResult(
            file_path=source,
            success=True,
            records=records,
            chunks_created=len(chunks),
            records_created=len(records),
            skipped_chunks=skipped
        )

    def convert_file(self, file_path: Path) -> ConversionResult:
        """
        Convert a single document.

        Failures are returned as an unsuccessful result so that one bad
        document does not stop a batch.
        """
        abs_path = file_path.resolve()

        try:
            text = extract_text(abs_path)
        except (ValueError, OSError) as e:
            logger.error("Error processing file %s: %s", abs_path, e)
            return ConversionResult(
                file_path=str(abs_path),
                success=False,
                error_message=str(e)
            )

        return self.convert_text(text, source=str(abs_path))

    def convert_files(
        self,
        file_paths: Sequence[Path],
        show_progress: bool = False
    ) -> Tuple[List[ConversionResult], List[TrainingRecord]]:
        """
        Convert several documents into one padded list of records.

        Args:
            file_paths: Documents to convert
            show_progress: Whether to show a tqdm progress bar

        Returns:
            Tuple of (per-document results, padded records)

        Raises:
            ConversionError: If no document produced a record
        """
        results = []
        records: List[TrainingRecord] = []

        for file_path in tqdm(file_paths, desc="Converting files", disable=not show_progress):
            result = self.convert_file(file_path)
            results.append(result)
            records.extend(result.records)

        if not records:
            raise ConversionError("No valid content extracted from files")

        padded = pad_records(records, self.settings.system_instructions, self.settings.min_records)
        logger.info(
            "Converted %d of %d files into %d records (%d placeholders)",
            sum(1 for r in results if r.success),
            len(results),
            len(padded),
            len(padded) - len(records)
        )

        if self.settings.validate_output:
            self.check_output(padded)

        return results, padded

    def check_output(self, records: Sequence[TrainingRecord]) -> ValidationResult:
        """Validate generated records the same way an uploaded file is validated."""
        validation = validate_jsonl(records_to_jsonl(records), self.settings.min_records)
        for error in validation.errors:
            logger.warning("Generated output line %d: %s", error.line, error.error)
        return validation

    def write_jsonl(self, records: Sequence[TrainingRecord], output_path: Path) -> Path:
        """Write records to ``output_path`` as JSONL."""
        path = save_records(records, output_path)
        logger.info("Wrote %d records to %s", len(records), path)
        return path

    def get_stats(self, results: Sequence[ConversionResult]) -> Dict[str, Any]:
        """Summarize a batch of conversion results."""
        return {
            "files_processed": len(results),
            "files_converted": sum(1 for r in results if r.success),
            "chunks_created": sum(r.chunks_created for r in results),
            "records_created": sum(r.records_created for r in results),
            "chunks_skipped": sum(r.skipped_chunks for r in results),
            "format_type": self.settings.format_type.value,
        }


def create_pipeline(
    profile: str = "default",
    overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True
) -> ConversionPipeline:
    """
    Create a conversion pipeline.

    Args:
        profile: Settings profile name
        overrides: Explicit setting values (None entries ignored)
        use_env: Whether TUNEPREP_* environment variables apply

    Returns:
        ConversionPipeline instance
    """
    settings = resolve_settings(profile, overrides, use_env=use_env)
    return ConversionPipeline(settings)
