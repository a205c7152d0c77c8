"""
Async HTTP client for the PaperChat endpoints.

Non-2xx responses raise ApiError carrying the status and the server's
``error`` message; transport failures propagate as httpx exceptions. Both
are left for paperchat.core.classifier to interpret.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from paperchat.core.config import settings
from paperchat.core.errors import ApiError
from paperchat.core.validation import PDFFile

logger = logging.getLogger(__name__)


class PaperChatAPI:
    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        # No explicit timeout: the server enforces its own upstream limits
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
            transport=transport,
            timeout=None,
        )

    async def __aenter__(self) -> "PaperChatAPI":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _raise_for_status(r: httpx.Response) -> Dict[str, Any]:
        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if not r.is_success:
            message = data.get("error") if isinstance(data.get("error"), str) else ""
            raise ApiError(message, status=r.status_code, code=data.get("code"))
        return data

    async def upload(self, file: PDFFile) -> Dict[str, Any]:
        files = {"file": (file.filename, file.content, file.content_type or "application/octet-stream")}
        r = await self._client.post("/upload", files=files)
        return self._raise_for_status(r)

    async def chat(self, message: str, document_text: str) -> Dict[str, Any]:
        r = await self._client.post("/chat", json={"message": message, "documentText": document_text})
        return self._raise_for_status(r)

    async def suggestions(self, document_text: str, document_type: str) -> List[str]:
        r = await self._client.post(
            "/suggestions", json={"documentText": document_text, "documentType": document_type}
        )
        data = self._raise_for_status(r)
        return [s for s in data.get("suggestions") or [] if isinstance(s, str)]

    async def feedback(self, message_id: str, feedback: str) -> Dict[str, Any]:
        r = await self._client.post("/feedback", json={"messageId": message_id, "feedback": feedback})
        return self._raise_for_status(r)

    async def sample(self) -> Dict[str, Any]:
        r = await self._client.get("/sample")
        return self._raise_for_status(r)
