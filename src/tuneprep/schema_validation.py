"""Validation of JSONL fine-tuning files."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import jsonschema

from .types import VALID_ROLES, ValidationError, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_MIN_LINES = 10

RECORD_MESSAGE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "role": {"enum": list(VALID_ROLES)},
        "content": {"type": "string", "minLength": 1},
    },
    "required": ["role", "content"],
}

_message_validator = jsonschema.Draft7Validator(RECORD_MESSAGE_SCHEMA)

_MISSING = object()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid constant {name}")


def _decode_line(line: str) -> Any:
    """Decode one line as strict JSON (no NaN or Infinity)."""
    return json.loads(line, parse_constant=_reject_constant)


def _describe(value: Any) -> str:
    if value is _MISSING:
        return "missing"
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _message_problems(message: Any) -> List[str]:
    """Return the role and content problems of one message, role first."""
    role_bad = False
    content_bad = False

    for error in _message_validator.iter_errors(message):
        field = error.path[0] if error.path else None
        if field == "role":
            role_bad = True
        elif field == "content":
            content_bad = True
        elif error.validator == "required":
            role_bad = role_bad or "role" not in error.instance
            content_bad = content_bad or "content" not in error.instance
        else:
            role_bad = content_bad = True

    problems = []
    if role_bad:
        role = message.get("role", _MISSING) if isinstance(message, dict) else _MISSING
        problems.append(
            f"Invalid message role: {_describe(role)}. "
            "Must be 'system', 'user', or 'assistant'"
        )
    if content_bad:
        problems.append('Message must have a string "content" field')
    return problems


def validate_record(record: Any) -> List[str]:
    """
    Check one decoded record.

    Stops at the first structural problem with ``messages``; otherwise every
    message is checked and can contribute up to two problems.

    Args:
        record: Decoded JSON value

    Returns:
        Error messages, empty when the record is valid
    """
    messages = record.get("messages") if isinstance(record, dict) else None
    if not isinstance(messages, list):
        return ['Missing or invalid "messages" array']
    if not messages:
        return ["Messages array cannot be empty"]

    problems = []
    for message in messages:
        problems.extend(_message_problems(message))
    return problems


def validate_jsonl(content: str, min_lines: int = DEFAULT_MIN_LINES) -> ValidationResult:
    """
    Validate line-delimited chat records.

    Blank lines are ignored; the remaining lines are numbered from 1. A
    shortage of lines is reported on line 0 and does not stop the per-line
    checks.

    Args:
        content: JSONL text
        min_lines: Minimum number of non-blank lines required

    Returns:
        Validation result with every problem found
    """
    lines = [line for line in content.split("\n") if line.strip()]
    errors: List[ValidationError] = []

    if len(lines) < min_lines:
        errors.append(ValidationError(
            line=0,
            error=f"File must contain at least {min_lines} lines, found {len(lines)}"
        ))

    for line_no, line in enumerate(lines, 1):
        try:
            record = _decode_line(line)
        except (ValueError, RecursionError) as e:
            errors.append(ValidationError(line=line_no, error=f"Invalid JSON: {e}"))
            continue

        for problem in validate_record(record):
            errors.append(ValidationError(line=line_no, error=problem))

    if errors:
        logger.debug("JSONL validation found %d errors in %d lines", len(errors), len(lines))

    return ValidationResult(valid=not errors, errors=errors, line_count=len(lines))


def validate_jsonl_file(
    file_path: Union[str, Path],
    min_lines: int = DEFAULT_MIN_LINES
) -> ValidationResult:
    """
    Validate a JSONL file on disk.

    Unreadable files are reported as a line-0 error rather than raised.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", file_path, e)
        return ValidationResult(
            valid=False,
            errors=[ValidationError(line=0, error=f"Error reading file: {e}")],
            line_count=0
        )

    return validate_jsonl(content, min_lines)
