"""Loading document text from plain-text files."""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".text", ".md", ".markdown"}
BINARY_EXTENSIONS = {".pdf", ".doc", ".docx"}


class UnsupportedFileTypeError(ValueError):
    """The document format cannot be read as text."""
    pass


def extract_text(file_path: Union[str, Path]) -> str:
    """
    Read the text of a document.

    Args:
        file_path: Path to a text or markdown file

    Returns:
        Document text

    Raises:
        UnsupportedFileTypeError: If the extension is not a text format
        OSError: If the file cannot be read
    """
    path = Path(file_path)
    extension = path.suffix.lower()

    if extension in BINARY_EXTENSIONS:
        raise UnsupportedFileTypeError(
            f"{extension} files are not supported. Convert the document to plain text or markdown first."
        )
    if extension not in TEXT_EXTENSIONS:
        raise UnsupportedFileTypeError(f"Unsupported file type: {extension or path.name}")

    logger.debug("Reading %s", path)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()
