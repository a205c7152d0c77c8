"""
Client-side state for the upload and chat panes.

Each state object allows one request in flight. It records the classified
error of the last failure and counts user-initiated retries against
``max_retries``. The properties at the bottom of RequestState are what a UI
renders: alert text, whether a Retry control is shown and the
"Retry attempt n of m" caption.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from paperchat.core.config import settings
from paperchat.core.documents import DocumentType, detect_document_type
from paperchat.core.errors import ERROR_MESSAGES, ErrorRecord, max_retries_error
from paperchat.core.validation import PDFFile

logger = logging.getLogger(__name__)

Sender = Literal["user", "ai"]
Feedback = Literal["helpful", "unhelpful"]
ViewMode = Literal["pdf", "text"]


class Phase(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RETRYING = "retrying"
    FAILED_TERMINAL = "failed-terminal"


class StateBusyError(RuntimeError):
    """A second request was started while one is still in flight."""


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Message:
    id: str
    content: str
    sender: Sender
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    feedback: Optional[Feedback] = None
    is_error: bool = False


@dataclass(frozen=True)
class ChatRequest:
    """What was sent, captured at send time so a retry re-sends exactly this."""

    message: str
    document_text: str


@dataclass
class DocumentInfo:
    text: str
    pages: int
    filename: str
    is_demo: bool = False
    pdf_bytes: Optional[bytes] = None
    view_mode: ViewMode = "text"

    def __post_init__(self) -> None:
        if self.pdf_bytes:
            self.view_mode = "pdf"

    @property
    def document_type(self) -> DocumentType:
        return detect_document_type(self.text)

    def toggle_view(self) -> ViewMode:
        # Without the original bytes there is nothing to show in PDF mode
        if self.pdf_bytes:
            self.view_mode = "text" if self.view_mode == "pdf" else "pdf"
        return self.view_mode


class RequestState:
    exhausted_message = ERROR_MESSAGES["MAX_RETRIES_REACHED"]

    def __init__(self, max_retries: Optional[int] = None) -> None:
        self.max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self.is_loading = False
        self.error: Optional[ErrorRecord] = None
        self.retry_count = 0
        self.phase = Phase.IDLE

    def _start(self) -> None:
        if self.is_loading:
            raise StateBusyError("A request is already in flight")
        self.retry_count = 0
        self.error = None
        self.is_loading = True
        self.phase = Phase.SENDING

    def _exhaust(self) -> None:
        self.is_loading = False
        self.error = max_retries_error(self.exhausted_message)
        self.phase = Phase.FAILED_TERMINAL

    def _start_retry(self) -> bool:
        """Consume one retry; go terminal instead when none is left."""
        if self.is_loading:
            raise StateBusyError("A request is already in flight")
        if self.retry_count >= self.max_retries:
            self._exhaust()
            return False
        self.retry_count += 1
        self.error = None
        self.is_loading = True
        self.phase = Phase.RETRYING
        return True

    def _resolve_success(self) -> None:
        self.is_loading = False
        self.error = None
        self.retry_count = 0
        self.phase = Phase.SUCCEEDED

    def _resolve_failure(self, record: ErrorRecord) -> None:
        self.is_loading = False
        if record.retryable and self.retry_count >= self.max_retries:
            self._exhaust()
            return
        self.error = record
        self.phase = Phase.FAILED

    def reject(self, record: ErrorRecord) -> None:
        """Record a local validation failure; nothing was sent."""
        if self.is_loading:
            raise StateBusyError("A request is already in flight")
        self.error = record
        self.phase = Phase.FAILED

    def clear_error(self) -> None:
        self.error = None
        self.retry_count = 0
        if not self.is_loading:
            self.phase = Phase.IDLE

    @property
    def retry_available(self) -> bool:
        return self.error is not None and self.error.retryable and self.retry_count < self.max_retries

    @property
    def retry_status(self) -> Optional[str]:
        if self.error is not None and 0 < self.retry_count < self.max_retries:
            return f"Retry attempt {self.retry_count} of {self.max_retries}"
        return None

    @property
    def alert_message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None


class ConversationState(RequestState):
    """Transcript plus the send/retry state machine of the chat pane."""

    def __init__(self, max_retries: Optional[int] = None) -> None:
        super().__init__(max_retries)
        self.messages: List[Message] = []
        self.last_request: Optional[ChatRequest] = None
        self.has_document = False

    @property
    def input_disabled(self) -> bool:
        return self.is_loading or not self.has_document

    def begin_send(self, content: str, document_text: str) -> ChatRequest:
        self._start()
        self.messages.append(Message(id=f"user_{_now_ms()}", content=content, sender="user"))
        self.last_request = ChatRequest(message=content, document_text=document_text)
        return self.last_request

    def begin_retry(self) -> Optional[ChatRequest]:
        if self.last_request is None:
            return None
        if not self._start_retry():
            return None
        return self.last_request

    def succeed(self, response: str, message_id: Optional[str] = None) -> Message:
        msg = Message(id=message_id or f"ai_{_now_ms()}", content=response, sender="ai")
        self.messages.append(msg)
        self._resolve_success()
        return msg

    def fail(self, record: ErrorRecord) -> Message:
        msg = Message(id=f"error_{_now_ms()}", content=record.message, sender="ai", is_error=True)
        self.messages.append(msg)
        self._resolve_failure(record)
        return msg

    def patch_feedback(self, message_id: str, feedback: Feedback) -> bool:
        found = False
        for msg in self.messages:
            if msg.id == message_id:
                msg.feedback = feedback
                found = True
        return found


class UploadState(RequestState):
    """Upload / demo loading state of the document pane."""

    exhausted_message = ERROR_MESSAGES["MAX_UPLOAD_RETRIES_REACHED"]

    def __init__(self, max_retries: Optional[int] = None) -> None:
        super().__init__(max_retries)
        self.document: Optional[DocumentInfo] = None
        self.last_file: Optional[PDFFile] = None

    def begin_upload(self, file: PDFFile) -> None:
        self._start()
        self.last_file = file

    def begin_demo(self) -> None:
        self._start()
        self.last_file = None

    def begin_retry(self) -> bool:
        return self._start_retry()

    def loaded(self, document: DocumentInfo) -> DocumentInfo:
        self.document = document
        self._resolve_success()
        return document

    def fail(self, record: ErrorRecord) -> None:
        self._resolve_failure(record)
