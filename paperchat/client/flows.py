"""
Flows tying validation, the HTTP client, classification and state together.

Every user action goes through two phases: a synchronous validation step
that never touches the network, then the request itself, wrapped by
with_retry and classified once on failure.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

from paperchat.client.api import PaperChatAPI
from paperchat.client.state import (
    ChatRequest,
    ConversationState,
    DocumentInfo,
    Feedback,
    UploadState,
)
from paperchat.core.classifier import Context, classify
from paperchat.core.config import settings
from paperchat.core.documents import STATIC_SUGGESTIONS, detect_document_type
from paperchat.core.errors import ERROR_MESSAGES, ErrorKind, ErrorRecord, create_upload_error
from paperchat.core.retry import Sleep, with_retry
from paperchat.core.validation import PDFFile, validate_document_text, validate_file, validate_message

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Flow:
    def __init__(
        self,
        api: PaperChatAPI,
        *,
        auto_retries: Optional[int] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.api = api
        self.auto_retries = settings.CLIENT_AUTO_RETRIES if auto_retries is None else auto_retries
        self._sleep = sleep

    def _log_retry(self, context: Context) -> Callable[[int, BaseException], None]:
        def on_retry(attempt: int, exc: BaseException) -> None:
            logger.info("%s request failed (%s); automatic retry %d of %d", context, exc, attempt, self.auto_retries)
        return on_retry

    async def _call(self, operation: Callable[[], Awaitable[T]], context: Context) -> T:
        return await with_retry(
            operation,
            self.auto_retries,
            self._log_retry(context),
            sleep=self._sleep,
            context=context,
        )


class UploadFlow(_Flow):
    """Upload a PDF, or load the demo document, into an UploadState."""

    def __init__(self, api: PaperChatAPI, state: Optional[UploadState] = None, **kwargs) -> None:
        super().__init__(api, **kwargs)
        self.state = state or UploadState()

    async def upload(self, file: PDFFile) -> Optional[DocumentInfo]:
        check = validate_file(file)
        if not check.is_valid:
            assert check.error is not None
            self.state.reject(check.error)
            return None
        self.state.begin_upload(file)
        return await self._send_upload(file)

    async def retry(self) -> Optional[DocumentInfo]:
        if self.state.error is None or not self.state.error.retryable:
            return None
        if self.state.last_file is None:
            return await self.load_demo(retry=True)
        file = self.state.last_file
        if not self.state.begin_retry():
            return None
        return await self._send_upload(file)

    async def _send_upload(self, file: PDFFile) -> Optional[DocumentInfo]:
        try:
            data = await self._call(lambda: self.api.upload(file), "upload")
        except Exception as exc:
            self.state.fail(classify(exc, "upload"))
            return None

        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            self.state.fail(create_upload_error(ErrorKind.PROCESSING_FAILED, ERROR_MESSAGES["EMPTY_PDF"]))
            return None

        return self.state.loaded(DocumentInfo(
            text=text,
            pages=int(data.get("pages") or 1),
            filename=data.get("filename") or file.filename or "Uploaded Document",
            pdf_bytes=file.content,
        ))

    async def load_demo(self, retry: bool = False) -> Optional[DocumentInfo]:
        if retry:
            if not self.state.begin_retry():
                return None
        else:
            self.state.begin_demo()

        try:
            data = await self._call(self.api.sample, "demo")
        except Exception as exc:
            self.state.fail(classify(exc, "demo"))
            return None

        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            self.state.fail(ErrorRecord(ErrorKind.PROCESSING_FAILED, ERROR_MESSAGES["DEMO_EMPTY"]))
            return None

        return self.state.loaded(DocumentInfo(
            text=text,
            pages=int(data.get("pages") or 1),
            filename=data.get("filename") or "Sample Document",
            is_demo=True,
        ))


class ChatFlow(_Flow):
    """Send questions about one document and keep the transcript."""

    def __init__(
        self,
        api: PaperChatAPI,
        document_text: str,
        state: Optional[ConversationState] = None,
        **kwargs,
    ) -> None:
        super().__init__(api, **kwargs)
        self.document_text = document_text
        self.state = state or ConversationState()
        self.state.has_document = bool(document_text)

    def _validate(self, text: str) -> Optional[ErrorRecord]:
        for check in (validate_message(text), validate_document_text(self.document_text)):
            if not check.is_valid:
                return check.error
        return None

    async def send(self, text: str) -> bool:
        """Send a new question. Returns True when an answer was appended."""
        error = self._validate(text)
        if error is not None:
            self.state.reject(error)
            return False
        request = self.state.begin_send(text.strip(), self.document_text)
        return await self._dispatch(request)

    async def retry(self) -> bool:
        """Re-send the last dispatched question, if the retry budget allows."""
        if self.state.error is None or not self.state.error.retryable:
            return False
        request = self.state.begin_retry()
        if request is None:
            return False
        return await self._dispatch(request)

    async def _dispatch(self, request: ChatRequest) -> bool:
        try:
            data = await self._call(lambda: self.api.chat(request.message, request.document_text), "chat")
        except Exception as exc:
            self.state.fail(classify(exc, "chat"))
            return False
        self.state.succeed(str(data.get("response") or ""), data.get("messageId"))
        return True

    async def submit_feedback(self, message_id: str, feedback: Feedback) -> None:
        """Fire-and-forget: failures are logged, never shown and never retried."""
        try:
            await self.api.feedback(message_id, feedback)
        except Exception as exc:
            logger.error("Failed to submit feedback for %s: %s", message_id, exc)
            return
        self.state.patch_feedback(message_id, feedback)


class SuggestionsFlow(_Flow):
    """Suggested opening questions, with a static fallback per document type."""

    async def fetch(self, document_text: str) -> List[str]:
        document_type = detect_document_type(document_text)
        try:
            items = await self._call(lambda: self.api.suggestions(document_text, document_type), "chat")
        except Exception as exc:
            logger.warning("Suggestions unavailable (%s); using defaults for %s", exc, document_type)
            items = []
        return items or list(STATIC_SUGGESTIONS[document_type])
