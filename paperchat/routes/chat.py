import logging
import random
import string
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from paperchat.core.config import settings
from paperchat.core.errors import ERROR_MESSAGES, ConfigurationError, LLMServiceError
from paperchat.models.schemas import ChatResponse
from paperchat.services.llm_client import ChatMessage, LLMClient, get_llm_client, require_api_key
from paperchat.services.text_chunker import chunk_text

logger = logging.getLogger(__name__)

router = APIRouter()

SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the provided document content. "
    "Only answer questions based on the information in the document. If the document doesn't "
    "contain relevant information, say so clearly. Here is the document content: {context}"
)

_BASE36 = string.digits + string.ascii_lowercase


def new_message_id() -> str:
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"msg_{int(time.time() * 1000)}_{suffix}"


def llm_failure_to_http(err: LLMServiceError, *, timeout_message: str, generic_message: str) -> HTTPException:
    """Translate a provider failure into the status/message pair returned to the browser."""
    status, code = err.status, err.code
    if code == "timeout":
        return HTTPException(status_code=408, detail=timeout_message)
    if code == "insufficient_quota" or status == 429:
        return HTTPException(status_code=429, detail=ERROR_MESSAGES["RATE_LIMIT_EXCEEDED"])
    if code == "invalid_api_key" or status == 401:
        return HTTPException(status_code=401, detail=ERROR_MESSAGES["INVALID_API_KEY"])
    if code == "context_length_exceeded" or "context_length" in str(err):
        return HTTPException(status_code=400, detail=ERROR_MESSAGES["CONTEXT_TOO_LONG"])
    if code == "model_not_found" or status == 404:
        return HTTPException(status_code=500, detail="AI model not available. Please try again later.")
    if code == "invalid_request_error" or status == 400:
        return HTTPException(status_code=400, detail=ERROR_MESSAGES["INVALID_REQUEST"])
    if code == "network":
        return HTTPException(status_code=503, detail=ERROR_MESSAGES["NETWORK_CONNECTION"])
    return HTTPException(status_code=500, detail=generic_message)


def _validate_chat_body(body: Dict[str, Any]) -> None:
    message = body.get("message")
    document_text = body.get("documentText")

    if not message or not isinstance(message, str):
        raise HTTPException(status_code=400, detail="Message is required and must be a string")
    if not document_text or not isinstance(document_text, str):
        raise HTTPException(status_code=400, detail="Document text is required and must be a string")
    if not message.strip():
        raise HTTPException(status_code=400, detail="Message cannot be empty")
    if len(message) > settings.MAX_MESSAGE_CHARS:
        raise HTTPException(
            status_code=400,
            detail=f"Message too long. Please keep your question under {settings.MAX_MESSAGE_CHARS} characters.",
        )
    if not document_text.strip():
        raise HTTPException(status_code=400, detail="Document text is empty. Please upload a valid PDF document.")


@router.post("/chat", response_model=ChatResponse)
async def chat(body: Dict[str, Any], llm: LLMClient = Depends(get_llm_client)) -> ChatResponse:
    """Answer a question about the document text sent along with it."""
    _validate_chat_body(body)
    message: str = body["message"]
    document_text: str = body["documentText"]

    try:
        require_api_key(settings.OPENAI_API_KEY)
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    chunks = chunk_text(document_text, settings.CONTEXT_CHUNK_CHARS)
    context = chunks[0] if chunks else document_text[: settings.CONTEXT_CHUNK_CHARS]

    messages = [
        ChatMessage(role="system", content=SYSTEM_PROMPT.format(context=context)),
        ChatMessage(role="user", content=message),
    ]
    try:
        answer = await llm.chat_complete(
            messages,
            max_tokens=settings.CHAT_MAX_TOKENS,
            temperature=settings.TEMPERATURE,
            timeout=settings.CHAT_TIMEOUT_SECONDS,
        )
    except LLMServiceError as e:
        logger.error("Chat error: %s", e)
        raise llm_failure_to_http(
            e,
            timeout_message=ERROR_MESSAGES["REQUEST_TIMEOUT"],
            generic_message=ERROR_MESSAGES["AI_SERVICE_UNAVAILABLE"],
        )

    if not answer:
        raise HTTPException(status_code=500, detail="AI service returned an empty response. Please try again.")

    return ChatResponse(response=answer, message_id=new_message_id())
