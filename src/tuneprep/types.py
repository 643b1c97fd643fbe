"""Pydantic models for training records, validation results and conversions."""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Role = Literal["system", "user", "assistant"]

VALID_ROLES = ("system", "user", "assistant")


class FormatType(str, Enum):
    """How a text chunk is turned into a conversation."""
    KNOWLEDGE = "knowledge"
    QA = "qa"
    CONTENT = "content"


class TextSegment(BaseModel):
    """A trimmed chunk of a source document with its offsets in that document."""
    text: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)

    class Config:
        frozen = True


class Message(BaseModel):
    """A single chat message."""
    role: Role
    content: str = Field(min_length=1)


class TrainingRecord(BaseModel):
    """One line of a fine-tuning file: an ordered list of messages."""
    messages: List[Message] = Field(min_length=1)

    def to_jsonl_dict(self) -> dict:
        """Plain dict in the wire shape ``{"messages": [...]}``."""
        return {
            "messages": [
                {"role": msg.role, "content": msg.content} for msg in self.messages
            ]
        }


class ValidationError(BaseModel):
    """A problem found in a JSONL file. Line 0 is a file-level problem."""
    line: int = Field(ge=0)
    error: str


class ValidationResult(BaseModel):
    """Outcome of validating a JSONL training file."""
    valid: bool
    errors: List[ValidationError] = Field(default_factory=list)
    line_count: int = Field(0, alias="lineCount")

    class Config:
        populate_by_name = True


class TrainingDraft(BaseModel):
    """A hand-written prompt and the answer the model should give."""
    prompt: str
    ideal_answer: str

    @field_validator("prompt", "ideal_answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt and ideal_answer are required")
        return value


class ConversionResult(BaseModel):
    """Result of converting a single document into training records."""
    file_path: str
    success: bool
    records: List[TrainingRecord] = Field(default_factory=list)
    chunks_created: int = 0
    records_created: int = 0
    skipped_chunks: int = 0
    error_message: Optional[str] = None
