"""Turning text chunks and drafts into chat-style training records."""

import logging
import re
from typing import Iterable, List, Sequence, Tuple, Union

from .types import FormatType, Message, TrainingDraft, TrainingRecord

logger = logging.getLogger(__name__)

KNOWLEDGE_PROMPT = "What information do you have about this topic?"
QA_FALLBACK_PROMPT = "Can you provide more information about this?"
CONTENT_ACKNOWLEDGEMENT = "I understand. How can I help you with this information?"
PLACEHOLDER_PROMPT = "Hello"
PLACEHOLDER_ANSWER = "Hello! How can I help you?"

# Hosted fine-tuning rejects files with fewer examples than this.
MIN_TRAINING_RECORDS = 10
MIN_CHUNK_CHARS = 50
MIN_SENTENCE_CHARS = 10

SENTENCE_TERMINATORS = re.compile(r"[.!?]+")


def _system_messages(system_instructions: str) -> List[Message]:
    instructions = (system_instructions or "").strip()
    if not instructions:
        return []
    return [Message(role="system", content=instructions)]


def split_sentences(text: str) -> List[str]:
    """Split on runs of sentence terminators, keeping fragments longer than 10 characters."""
    return [s for s in SENTENCE_TERMINATORS.split(text) if len(s.strip()) > MIN_SENTENCE_CHARS]


def build_record(
    segment: str,
    format_type: Union[FormatType, str] = FormatType.KNOWLEDGE,
    system_instructions: str = ""
) -> TrainingRecord:
    """
    Build one training record from a trimmed text segment.

    Args:
        segment: Chunk text, already trimmed
        format_type: knowledge, qa or content
        system_instructions: Optional system prompt placed first

    Returns:
        Training record
    """
    format_type = FormatType(format_type)
    messages = _system_messages(system_instructions)

    if format_type is FormatType.KNOWLEDGE:
        messages.append(Message(role="user", content=KNOWLEDGE_PROMPT))
        messages.append(Message(role="assistant", content=segment))

    elif format_type is FormatType.QA:
        sentences = split_sentences(segment)
        if len(sentences) >= 2:
            question = sentences[0].strip() + "?"
            answer = ". ".join(sentences[1:]).strip()
            messages.append(Message(role="user", content=question))
            messages.append(Message(role="assistant", content=answer))
        else:
            messages.append(Message(role="user", content=QA_FALLBACK_PROMPT))
            messages.append(Message(role="assistant", content=segment))

    else:
        messages.append(Message(role="user", content=segment))
        messages.append(Message(role="assistant", content=CONTENT_ACKNOWLEDGEMENT))

    return TrainingRecord(messages=messages)


def build_records(
    chunks: Iterable[str],
    format_type: Union[FormatType, str] = FormatType.KNOWLEDGE,
    system_instructions: str = "",
    min_chunk_chars: int = MIN_CHUNK_CHARS
) -> Tuple[List[TrainingRecord], int]:
    """
    Build records for every chunk long enough to be worth training on.

    Returns:
        Tuple of (records, number of chunks skipped as too short)
    """
    records = []
    skipped = 0

    for chunk in chunks:
        trimmed = chunk.strip()
        if len(trimmed) < min_chunk_chars:
            skipped += 1
            continue
        records.append(build_record(trimmed, format_type, system_instructions))

    if skipped:
        logger.debug("Skipped %d chunks shorter than %d characters", skipped, min_chunk_chars)
    return records, skipped


def placeholder_record(system_instructions: str = "") -> TrainingRecord:
    """Generic greeting exchange used to reach the minimum record count."""
    messages = _system_messages(system_instructions)
    messages.append(Message(role="user", content=PLACEHOLDER_PROMPT))
    messages.append(Message(role="assistant", content=PLACEHOLDER_ANSWER))
    return TrainingRecord(messages=messages)


def pad_records(
    records: Sequence[TrainingRecord],
    system_instructions: str = "",
    min_records: int = MIN_TRAINING_RECORDS
) -> List[TrainingRecord]:
    """Return a copy of records padded with placeholders up to ``min_records``."""
    padded = list(records)
    missing = min_records - len(padded)
    if missing > 0:
        logger.info("Padding %d records with %d placeholders", len(padded), missing)
        padded.extend(placeholder_record(system_instructions) for _ in range(missing))
    return padded


def drafts_to_records(
    drafts: Sequence[TrainingDraft],
    system_instructions: str = ""
) -> List[TrainingRecord]:
    """
    Convert hand-written drafts into records, keeping their order.

    Raises:
        ValueError: If there are no drafts
    """
    if not drafts:
        raise ValueError("No training drafts to export")

    records = []
    for draft in drafts:
        messages = _system_messages(system_instructions)
        messages.append(Message(role="user", content=draft.prompt))
        messages.append(Message(role="assistant", content=draft.ideal_answer))
        records.append(TrainingRecord(messages=messages))
    return records
