"""
Pre-flight validation run before any network call.

All functions are pure and synchronous. A failed check returns an
ErrorRecord so the caller can render it exactly like a server failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from paperchat.core.config import settings
from paperchat.core.errors import (
    ERROR_MESSAGES,
    ErrorKind,
    ErrorRecord,
    create_upload_error,
)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class PDFFile:
    filename: str
    content_type: Optional[str]
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[ErrorRecord] = None


VALID = ValidationResult(is_valid=True)


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error=ErrorRecord(ErrorKind.INVALID_REQUEST, message))


def validate_file(file: PDFFile, max_bytes: Optional[int] = None) -> ValidationResult:
    """
    Check content type and size of a file before uploading it.

    The type check runs first, so a non-PDF is reported as such whatever its size.
    """
    limit = settings.max_file_size_bytes if max_bytes is None else max_bytes

    if file.content_type != PDF_CONTENT_TYPE:
        return ValidationResult(is_valid=False, error=create_upload_error(ErrorKind.INVALID_FILE_TYPE))

    if file.size > limit:
        return ValidationResult(is_valid=False, error=create_upload_error(ErrorKind.FILE_TOO_LARGE))

    return VALID


def validate_message(message: Any, max_chars: Optional[int] = None) -> ValidationResult:
    limit = settings.MAX_MESSAGE_CHARS if max_chars is None else max_chars

    if not isinstance(message, str):
        return _invalid("Message is required")

    if not message.strip():
        return _invalid("Message cannot be empty")

    if len(message) > limit:
        return _invalid(f"Message too long. Please keep your question under {limit} characters.")

    return VALID


def validate_document_text(text: Any, max_chars: Optional[int] = None) -> ValidationResult:
    limit = settings.MAX_DOCUMENT_CHARS if max_chars is None else max_chars

    if not isinstance(text, str):
        return _invalid("Document text is required")

    if not text.strip():
        return _invalid("Document text is empty. Please upload a valid PDF document.")

    if len(text) > limit:
        return _invalid(ERROR_MESSAGES["DOCUMENT_TOO_LONG"])

    return VALID


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Sanitize an uploaded filename before echoing it back.

    Args:
        filename: Original filename

    Returns:
        Filename without path separators or NUL bytes, at most 255 characters
    """
    if not filename:
        return "document.pdf"

    # Remove directory separators and null bytes
    filename = filename.replace("\x00", "").replace("/", "_").replace("\\", "_")

    # Remove leading dots and spaces
    filename = filename.lstrip(". ")

    if len(filename) > 255:
        # Keep extension if present
        parts = filename.rsplit(".", 1)
        if len(parts) == 2:
            name, ext = parts
            filename = name[:250] + "." + ext[:4]
        else:
            filename = filename[:255]

    return filename or "document.pdf"
