"""IO utilities for JSONL files, drafts and document discovery."""

import json
import re
import time
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .types import TrainingDraft, TrainingRecord


def safe_filename(name: str) -> str:
    """
    Convert a string to a safe filename.

    Args:
        name: Input string

    Returns:
        Safe filename string
    """
    # Remove or replace unsafe characters
    safe = re.sub(r'[^\w\-_.]', '_', name)
    safe = re.sub(r'_+', '_', safe)
    safe = safe.strip('_')
    if not safe:
        safe = "unnamed"
    return safe.lower()


def default_output_name(prefix: str = "converted") -> str:
    """Timestamped JSONL filename, e.g. ``converted-1712345678901.jsonl``."""
    return f"{safe_filename(prefix)}-{int(time.time() * 1000)}.jsonl"


def record_to_line(record: TrainingRecord) -> str:
    """Serialize a record as a single JSONL line (no newline)."""
    return json.dumps(record.to_jsonl_dict(), ensure_ascii=False)


def records_to_jsonl(records: Sequence[TrainingRecord]) -> str:
    """Serialize records to JSONL text, one record per line."""
    return "\n".join(record_to_line(record) for record in records)


def save_records(records: Sequence[TrainingRecord], file_path: Path) -> Path:
    """
    Save records as a JSONL file.

    Args:
        records: Records to save
        file_path: Path to save to

    Returns:
        The path written
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(records_to_jsonl(records))
    return file_path


def load_jsonl(file_path: Path) -> List[Dict[str, Any]]:
    """
    Load JSONL from file.

    Args:
        file_path: Path to JSONL file

    Returns:
        List of parsed JSON objects
    """
    data = []
    with open(file_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if line:
                data.append(json.loads(line))
    return data


def load_drafts(file_path: Path) -> List[TrainingDraft]:
    """
    Load training drafts from a JSON array or a JSONL file.

    Each entry needs ``prompt`` and ``ideal_answer``.

    Raises:
        ValueError: If the file is not a JSON array or JSONL of objects
        pydantic.ValidationError: If a draft is missing a field
    """
    if file_path.suffix.lower() == ".jsonl":
        entries = load_jsonl(file_path)
    else:
        with open(file_path, 'r', encoding='utf-8') as f:
            entries = json.load(f)

    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ValueError(f"Expected a list of draft objects in {file_path}")

    return [TrainingDraft(**entry) for entry in entries]


def find_files(
    directory: Path,
    patterns: List[str],
    recursive: bool = True
) -> List[Path]:
    """
    Find files matching patterns in directory.

    Args:
        directory: Directory to search
        patterns: List of glob patterns
        recursive: Whether to search recursively

    Returns:
        List of matching file paths
    """
    files = []

    if not directory.exists():
        return files

    for pattern in patterns:
        if recursive:
            files.extend(directory.rglob(pattern))
        else:
            files.extend(directory.glob(pattern))

    # Remove duplicates and sort
    return sorted(set(files))


def expand_paths(paths: Sequence[Path], patterns: List[str]) -> List[Path]:
    """Replace directories in ``paths`` with the matching files they contain."""
    expanded = []
    for path in paths:
        if path.is_dir():
            expanded.extend(find_files(path, patterns))
        else:
            expanded.append(path)
    return expanded
