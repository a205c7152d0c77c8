"""
Map raw failures to ErrorRecord.

The table is evaluated top to bottom and the first match wins.
"""
from __future__ import annotations

import logging
import socket
from typing import Literal, Optional

import httpx

from paperchat.core.errors import ERROR_MESSAGES, ErrorKind, ErrorRecord

logger = logging.getLogger(__name__)

Context = Literal["upload", "chat", "demo"]

TRANSPORT_ERROR_CODES = frozenset({"ECONNRESET", "ETIMEDOUT", "ENOTFOUND"})

_SERVER_ERROR_MESSAGES = {
    "upload": ERROR_MESSAGES["PROCESSING_FAILED"],
    "chat": ERROR_MESSAGES["AI_SERVICE_UNAVAILABLE"],
    "demo": ERROR_MESSAGES["DEMO_UNAVAILABLE"],
}


def _status_of(raw: BaseException) -> Optional[int]:
    status = getattr(raw, "status", None)
    if status is None and isinstance(raw, httpx.HTTPStatusError):
        status = raw.response.status_code
    return status if isinstance(status, int) else None


def _code_of(raw: BaseException) -> Optional[str]:
    code = getattr(raw, "code", None)
    return code if isinstance(code, str) else None


def _message_of(raw: BaseException) -> Optional[str]:
    message = getattr(raw, "message", None)
    return message if isinstance(message, str) and message else None


def _is_transport_failure(raw: BaseException, code: Optional[str]) -> bool:
    if isinstance(raw, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)):
        return True
    if isinstance(raw, (ConnectionError, TimeoutError, socket.gaierror)):
        return True
    return code in TRANSPORT_ERROR_CODES


def classify(raw: BaseException, context: Context = "chat") -> ErrorRecord:
    """Classify a raw failure from the given flow into an ErrorRecord."""
    if isinstance(raw, ErrorRecord):
        return raw

    logger.warning("%s API error: %s: %s", context, type(raw).__name__, raw)
    status = _status_of(raw)
    code = _code_of(raw)

    if status == 413:
        return ErrorRecord(ErrorKind.FILE_TOO_LARGE, ERROR_MESSAGES["FILE_TOO_LARGE"])

    if status == 400:
        if context == "upload":
            return ErrorRecord(ErrorKind.INVALID_FILE_TYPE, _message_of(raw) or ERROR_MESSAGES["INVALID_FILE_TYPE"])
        return ErrorRecord(ErrorKind.INVALID_REQUEST, _message_of(raw) or ERROR_MESSAGES["INVALID_REQUEST"])

    if status == 401 or code == "invalid_api_key":
        return ErrorRecord(ErrorKind.AUTH_ERROR, ERROR_MESSAGES["INVALID_API_KEY"])

    if status == 429 or code == "insufficient_quota":
        return ErrorRecord(ErrorKind.RATE_LIMIT, ERROR_MESSAGES["RATE_LIMIT_EXCEEDED"])

    if status in (408, 504):
        return ErrorRecord(ErrorKind.TIMEOUT, ERROR_MESSAGES["REQUEST_TIMEOUT"])

    if status is not None and status >= 500:
        return ErrorRecord(ErrorKind.SERVER_ERROR, _SERVER_ERROR_MESSAGES.get(context, ERROR_MESSAGES["AI_SERVICE_UNAVAILABLE"]))

    if _is_transport_failure(raw, code):
        return ErrorRecord(ErrorKind.NETWORK_ERROR, ERROR_MESSAGES["NETWORK_CONNECTION"])

    if code == "context_length_exceeded":
        return ErrorRecord(ErrorKind.CONTEXT_ERROR, ERROR_MESSAGES["CONTEXT_TOO_LONG"])

    return ErrorRecord(ErrorKind.UNKNOWN, ERROR_MESSAGES["UNKNOWN_ERROR"])
