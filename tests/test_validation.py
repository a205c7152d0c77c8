"""
Test validation utilities.
"""
import pytest
from paperchat.core.errors import ERROR_MESSAGES, ErrorKind
from paperchat.core.validation import (
    PDFFile,
    sanitize_filename,
    validate_document_text,
    validate_file,
    validate_message,
)

MIB = 1024 * 1024


def test_validate_file_accepts_pdf():
    result = validate_file(PDFFile("test.pdf", "application/pdf", b"test"))
    assert result.is_valid is True
    assert result.error is None


@pytest.mark.parametrize("content_type,size", [
    ("text/plain", 1),
    ("text/plain", 11 * MIB),
    ("image/png", 0),
    (None, 10),
])
def test_validate_file_rejects_non_pdf_regardless_of_size(content_type, size):
    result = validate_file(PDFFile("file.bin", content_type, b"x" * size))
    assert result.is_valid is False
    assert result.error.kind == ErrorKind.INVALID_FILE_TYPE
    assert result.error.message == ERROR_MESSAGES["INVALID_FILE_TYPE"]
    assert result.error.retryable is False


def test_validate_file_size_limit():
    at_limit = validate_file(PDFFile("ok.pdf", "application/pdf", b"x" * (10 * MIB)))
    assert at_limit.is_valid is True

    result = validate_file(PDFFile("large.pdf", "application/pdf", b"x" * (10 * MIB + 1)))
    assert result.is_valid is False
    assert result.error.kind == ErrorKind.FILE_TOO_LARGE
    assert result.error.message == ERROR_MESSAGES["FILE_TOO_LARGE"]
    assert result.error.retryable is False


def test_validate_message_valid():
    result = validate_message("Hello, how are you?")
    assert result.is_valid is True
    assert result.error is None


@pytest.mark.parametrize("text", ["", " ", "   ", "\n\t  "])
def test_validate_message_empty_or_whitespace(text):
    result = validate_message(text)
    assert result.is_valid is False
    assert result.error.message == "Message cannot be empty"


@pytest.mark.parametrize("value", [None, 42, ["hi"]])
def test_validate_message_non_string(value):
    result = validate_message(value)
    assert result.is_valid is False
    assert result.error.message == "Message is required"


def test_validate_message_length():
    assert validate_message("x" * 1000).is_valid is True
    result = validate_message("x" * 1001)
    assert result.is_valid is False
    assert result.error.message == "Message too long. Please keep your question under 1000 characters."
    assert result.error.retryable is False


def test_validate_document_text():
    assert validate_document_text("This is a valid document.").is_valid is True

    result = validate_document_text("")
    assert result.error.message == "Document text is required"

    result = validate_document_text("   ")
    assert result.error.message == "Document text is empty. Please upload a valid PDF document."

    result = validate_document_text("x" * 1_000_001)
    assert result.is_valid is False
    assert result.error.message == ERROR_MESSAGES["DOCUMENT_TOO_LONG"]


def test_sanitize_filename():
    """Test filename sanitization."""
    assert sanitize_filename("document.pdf") == "document.pdf"

    result = sanitize_filename("../../../etc/passwd")
    assert "/" not in result and "\\" not in result
    assert "etc_passwd" in result

    assert sanitize_filename("file\x00.pdf") == "file.pdf"
    assert sanitize_filename("  ...file.pdf") == "file.pdf"
    assert sanitize_filename("") == "document.pdf"
    assert sanitize_filename(None) == "document.pdf"

    result = sanitize_filename("a" * 300 + ".pdf")
    assert len(result) <= 255
    assert result.endswith(".pdf")
