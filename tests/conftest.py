"""
Pytest configuration and fixtures for testing PaperChat.
"""
from typing import List

import fitz
import pytest
from fastapi.testclient import TestClient

from paperchat.core.config import settings
from paperchat.core.errors import LLMServiceError
from paperchat.services.llm_client import ChatMessage, LLMClient, get_llm_client


class FakeLLMClient(LLMClient):
    """Returns queued answers (or raises queued errors) and records each call."""

    def __init__(self, *effects):
        self._effects = list(effects)
        self.calls: List[dict] = []

    async def chat_complete(self, messages: List[ChatMessage], *, max_tokens: int, temperature: float, timeout: float) -> str:
        self.calls.append({
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "timeout": timeout,
        })
        eff = self._effects.pop(0)
        if isinstance(eff, BaseException):
            raise eff
        return eff


@pytest.fixture
def client():
    """Test client for the FastAPI application."""
    from paperchat.main import app
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test-0123456789")
    return settings.OPENAI_API_KEY


@pytest.fixture
def fake_llm(api_key):
    """Install a FakeLLMClient; call with the answers/errors it should produce."""
    from paperchat.main import app

    def _install(*effects) -> FakeLLMClient:
        fake = FakeLLMClient(*effects)
        app.dependency_overrides[get_llm_client] = lambda: fake
        return fake

    return _install


@pytest.fixture
def provider_error():
    def _make(status=None, code=None, message="provider failed"):
        return LLMServiceError(message, status=status, code=code)
    return _make


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_bytes():
    return make_pdf("PaperChat test document. The answer is forty-two.", "Second page text.")


@pytest.fixture
def pdf_factory():
    return make_pdf
