"""Text extraction for files uploaded as workflow input."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from ..constants import MAX_UPLOAD_BYTES
from ..errors import FileValidationError
from .docx import extract_docx
from .pdf import extract_pdf

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".pdf", ".csv", ".doc", ".docx")

_ENCODINGS = ("utf-8-sig", "utf-8", "cp1252")
_PRINTABLE_RUN = re.compile(rb"[\x20-\x7e\t\r\n]{4,}")


def _extension(filename: str) -> str:
    return Path((filename or "").strip()).suffix.lower()


def validate_file(filename: str, size: int) -> Optional[str]:
    """Return a user-facing rejection reason, or ``None`` if acceptable."""
    if size > MAX_UPLOAD_BYTES:
        return "File size must be less than 10MB"
    if _extension(filename) not in SUPPORTED_EXTENSIONS:
        return "Supported formats: .txt, .pdf, .csv, .doc, .docx files"
    return None


def decode_text(data: bytes) -> str:
    for encoding in _ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 maps every byte
    return data.decode("latin-1")


def salvage_printable_text(data: bytes) -> str:
    """Recover readable ASCII runs from a binary document."""
    runs = (m.group().decode("ascii").strip() for m in _PRINTABLE_RUN.finditer(data))
    return re.sub(r"\s+", " ", " ".join(r for r in runs if r)).strip()


def read_file_text(filename: str, data: bytes) -> str:
    """Extract plain text from an uploaded file.

    Raises:
        FileValidationError: Unsupported type, oversize, empty or unreadable.
    """
    problem = validate_file(filename, len(data))
    if problem:
        raise FileValidationError(problem)
    if not data:
        raise FileValidationError("File is empty")

    extension = _extension(filename)
    try:
        if extension == ".pdf":
            text = extract_pdf(data)
        elif extension == ".docx":
            text = extract_docx(data)
        elif extension == ".doc":
            text = salvage_printable_text(data)
        else:
            text = decode_text(data)
    except FileValidationError:
        raise
    except Exception as exc:
        logger.warning(f"Failed to extract text from {filename}: {exc}")
        raise FileValidationError(
            f"Could not read {filename}. Please try copying and pasting the text instead."
        ) from exc

    text = text.strip()
    if not text:
        raise FileValidationError(f"No readable text found in {filename}")
    return text


__all__ = [
    "SUPPORTED_EXTENSIONS",
    "decode_text",
    "read_file_text",
    "salvage_printable_text",
    "validate_file",
]
