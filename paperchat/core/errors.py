"""
Error taxonomy shared by the upload and chat flows.

Raw failures (HTTP statuses, transport exceptions, provider error codes) are
turned into an ErrorRecord exactly once, by paperchat.core.classifier.
Everything downstream works with ErrorRecord only.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    # Upload
    FILE_TOO_LARGE = "file-too-large"
    INVALID_FILE_TYPE = "invalid-file-type"
    UPLOAD_FAILED = "upload-failed"
    PROCESSING_FAILED = "processing-failed"
    NETWORK_ERROR = "network-error"
    # Chat
    API = "api"
    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate-limit"
    UNKNOWN = "unknown"
    # Classifier-only
    INVALID_REQUEST = "invalid-request"
    AUTH_ERROR = "auth-error"
    SERVER_ERROR = "server-error"
    CONTEXT_ERROR = "context-error"
    # Terminal state after the retry budget is spent
    MAX_RETRIES_REACHED = "max-retries-reached"


UPLOAD_ERROR_KINDS = frozenset({
    ErrorKind.FILE_TOO_LARGE,
    ErrorKind.INVALID_FILE_TYPE,
    ErrorKind.UPLOAD_FAILED,
    ErrorKind.PROCESSING_FAILED,
    ErrorKind.NETWORK_ERROR,
})

CHAT_ERROR_KINDS = frozenset({
    ErrorKind.API,
    ErrorKind.NETWORK,
    ErrorKind.TIMEOUT,
    ErrorKind.RATE_LIMIT,
    ErrorKind.UNKNOWN,
})

# Retrying without changing the input cannot succeed for these
NON_RETRYABLE_KINDS = frozenset({
    ErrorKind.FILE_TOO_LARGE,
    ErrorKind.INVALID_FILE_TYPE,
    ErrorKind.INVALID_REQUEST,
    ErrorKind.AUTH_ERROR,
    ErrorKind.CONTEXT_ERROR,
    ErrorKind.MAX_RETRIES_REACHED,
})


ERROR_MESSAGES: Dict[str, str] = {
    # Upload errors
    "FILE_TOO_LARGE": "File too large. Maximum size is 10MB.",
    "INVALID_FILE_TYPE": "Please upload a PDF file. Only PDF files are supported.",
    "UPLOAD_FAILED": "Upload failed. Please try again.",
    "PROCESSING_FAILED": "Unable to process this PDF. The file might be corrupted or password-protected. Try a different file.",
    "NETWORK_ERROR": "Network error. Please check your internet connection and try again.",
    "EMPTY_PDF": "Unable to extract text from this PDF. The file might be empty or contain only images.",
    "PASSWORD_PROTECTED": "This PDF is password-protected. Please remove the password and try again.",
    "CORRUPTED_PDF": "Unable to read this PDF. The file might be corrupted. Try a different file.",
    "DOCUMENT_TOO_LONG": "This document is quite long. For best results, try asking specific questions about smaller sections.",
    # Chat errors
    "AI_SERVICE_UNAVAILABLE": "AI service temporarily unavailable. Please try again later.",
    "RATE_LIMIT_EXCEEDED": "AI service is busy. Please wait a moment and try again.",
    "REQUEST_TIMEOUT": "Request timed out. This document might be too long. Try asking a more specific question.",
    "INVALID_API_KEY": "Invalid API key. Please check your OpenAI configuration.",
    "CONTEXT_TOO_LONG": "This document is quite long. For best results, try asking specific questions about smaller sections.",
    "NETWORK_CONNECTION": "Network error. Please check your internet connection and try again.",
    "INVALID_REQUEST": "Invalid request. Please try rephrasing your question.",
    "MAX_RETRIES_REACHED": "Maximum retry attempts reached. Please try asking a different question.",
    "MAX_UPLOAD_RETRIES_REACHED": "Maximum retry attempts reached. Please try uploading a different file.",
    # Demo errors
    "DEMO_UNAVAILABLE": "Demo service temporarily unavailable. Please try again later.",
    "DEMO_LOAD_FAILED": "Failed to load demo document. Please try again.",
    "DEMO_EMPTY": "Demo document is empty. Please try uploading your own PDF.",
    # Generic errors
    "UNKNOWN_ERROR": "An unexpected error occurred. Please try again.",
    "RETRY_LATER": "Please try again later.",
}

_UPLOAD_DEFAULT_MESSAGES = {
    ErrorKind.FILE_TOO_LARGE: ERROR_MESSAGES["FILE_TOO_LARGE"],
    ErrorKind.INVALID_FILE_TYPE: ERROR_MESSAGES["INVALID_FILE_TYPE"],
    ErrorKind.UPLOAD_FAILED: ERROR_MESSAGES["UPLOAD_FAILED"],
    ErrorKind.PROCESSING_FAILED: ERROR_MESSAGES["PROCESSING_FAILED"],
    ErrorKind.NETWORK_ERROR: ERROR_MESSAGES["NETWORK_ERROR"],
}

_CHAT_DEFAULT_MESSAGES = {
    ErrorKind.API: ERROR_MESSAGES["AI_SERVICE_UNAVAILABLE"],
    ErrorKind.NETWORK: ERROR_MESSAGES["NETWORK_CONNECTION"],
    ErrorKind.TIMEOUT: ERROR_MESSAGES["REQUEST_TIMEOUT"],
    ErrorKind.RATE_LIMIT: ERROR_MESSAGES["RATE_LIMIT_EXCEEDED"],
    ErrorKind.UNKNOWN: ERROR_MESSAGES["UNKNOWN_ERROR"],
}


@dataclass(frozen=True)
class ErrorRecord:
    """A classified failure, ready to be shown to the user."""

    kind: ErrorKind
    message: str

    @property
    def retryable(self) -> bool:
        return self.kind not in NON_RETRYABLE_KINDS

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind.value, "message": self.message, "retryable": self.retryable}


def create_upload_error(kind: ErrorKind, message: Optional[str] = None) -> ErrorRecord:
    kind = ErrorKind(kind)
    if kind not in UPLOAD_ERROR_KINDS:
        raise ValueError(f"Not an upload error kind: {kind.value}")
    return ErrorRecord(kind=kind, message=message or _UPLOAD_DEFAULT_MESSAGES[kind])


def create_chat_error(kind: ErrorKind, message: Optional[str] = None) -> ErrorRecord:
    kind = ErrorKind(kind)
    if kind not in CHAT_ERROR_KINDS:
        raise ValueError(f"Not a chat error kind: {kind.value}")
    return ErrorRecord(kind=kind, message=message or _CHAT_DEFAULT_MESSAGES[kind])


def max_retries_error(message: Optional[str] = None) -> ErrorRecord:
    return ErrorRecord(
        kind=ErrorKind.MAX_RETRIES_REACHED,
        message=message or ERROR_MESSAGES["MAX_RETRIES_REACHED"],
    )


def is_retryable(record: ErrorRecord) -> bool:
    return record.retryable


# --------------------
# Raw failures
# --------------------

class ApiError(Exception):
    """A non-2xx response (or provider failure) before classification."""

    def __init__(self, message: str = "", *, status: Optional[int] = None, code: Optional[str] = None) -> None:
        super().__init__(message or (f"HTTP {status}" if status else "API error"))
        self.message = message
        self.status = status
        self.code = code


class DomainError(Exception):
    """Base class for server-side domain errors."""


class InvalidPDFError(DomainError):
    """Raised when the uploaded bytes cannot be parsed as a PDF."""


class PasswordProtectedPDFError(InvalidPDFError):
    """Raised when the PDF is encrypted and cannot be opened without a password."""


class EmptyPDFError(DomainError):
    """Raised when a PDF opens fine but yields no extractable text."""


class ConfigurationError(DomainError):
    """Raised when the LLM provider key is missing or obviously invalid."""


class LLMServiceError(ApiError, DomainError):
    """Raised when the LLM provider call fails; carries provider status and code."""
