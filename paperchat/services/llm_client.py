from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

import httpx

from paperchat.core.config import PLACEHOLDER_API_KEYS, settings
from paperchat.core.errors import ConfigurationError, LLMServiceError
from paperchat.services import log_timing


logger = logging.getLogger(__name__)

MIN_API_KEY_LENGTH = 10


@dataclass
class ChatMessage:
    role: str
    content: str


def require_api_key(api_key: Optional[str]) -> str:
    """Return the provider key or raise ConfigurationError when it is unusable."""
    if not api_key:
        raise ConfigurationError(
            "OpenAI API key not configured. Please set OPENAI_API_KEY in your environment variables."
        )
    if api_key in PLACEHOLDER_API_KEYS or len(api_key) < MIN_API_KEY_LENGTH:
        raise ConfigurationError("Invalid OpenAI API key. Please check your configuration.")
    return api_key


class LLMClient:
    """Abstraction over the chat-completion provider."""

    async def chat_complete(
        self,
        messages: List[ChatMessage],
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        raise NotImplementedError


class HttpLLMClient(LLMClient):
    """OpenAI-compatible /chat/completions client over httpx.

    Makes exactly one attempt per call: retry decisions belong to the caller.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._api_key = api_key or None
        self._model = model
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        h: Dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            h["Authorization"] = f"Bearer {self._api_key}"
        return h

    @staticmethod
    def _provider_error(r: httpx.Response) -> LLMServiceError:
        code: Optional[str] = None
        message = r.text[:200] if r.text else ""
        try:
            data: Any = r.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            err = data["error"]
            code = err.get("code") or err.get("type")
            message = str(err.get("message") or message)
        return LLMServiceError(f"LLM error {r.status_code}: {message}", status=r.status_code, code=code)

    async def chat_complete(
        self,
        messages: List[ChatMessage],
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        url = f"{self._base}/chat/completions"
        payload = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        with log_timing(logger, op="http_llm_chat", model=self._model, base_url=self._base):
            try:
                async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                    # httpx timeouts are per phase; this bounds the whole exchange
                    r = await asyncio.wait_for(client.post(url, json=payload, headers=self._headers()), timeout)
            except (httpx.TimeoutException, asyncio.TimeoutError) as e:
                raise LLMServiceError(f"LLM request timed out after {timeout}s", code="timeout") from e
            except httpx.TransportError as e:
                raise LLMServiceError(f"LLM service unreachable: {e}", code="network") from e

            if not 200 <= r.status_code < 300:
                raise self._provider_error(r)

            try:
                data = r.json()
                content = data["choices"][0]["message"]["content"]
            except (ValueError, KeyError, IndexError, TypeError) as e:
                raise LLMServiceError("Invalid OpenAI response format", status=502) from e
            return (content or "").strip()


def get_llm_client() -> LLMClient:
    return HttpLLMClient(settings.AGENT_BASE_URL, settings.OPENAI_API_KEY, settings.AGENT_MODEL)
