import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from paperchat.core.config import settings
from paperchat.core.documents import normalize_document_type
from paperchat.core.errors import ConfigurationError, LLMServiceError
from paperchat.models.schemas import SuggestionsResponse
from paperchat.routes.chat import llm_failure_to_http
from paperchat.services.llm_client import LLMClient, get_llm_client, require_api_key
from paperchat.services.suggestions import build_messages, parse_suggestions

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/suggestions", response_model=SuggestionsResponse)
async def suggestions(body: Dict[str, Any], llm: LLMClient = Depends(get_llm_client)) -> SuggestionsResponse:
    document_text = body.get("documentText")
    if not document_text or not isinstance(document_text, str):
        raise HTTPException(status_code=400, detail="Document text is required and must be a string")
    if not document_text.strip():
        raise HTTPException(status_code=400, detail="Document text cannot be empty")

    try:
        require_api_key(settings.OPENAI_API_KEY)
    except ConfigurationError:
        raise HTTPException(status_code=500, detail="OpenAI API key not configured")

    document_type = normalize_document_type(body.get("documentType"))
    try:
        raw = await llm.chat_complete(
            build_messages(document_text, document_type),
            max_tokens=settings.SUGGESTIONS_MAX_TOKENS,
            temperature=settings.TEMPERATURE,
            timeout=settings.SUGGESTIONS_TIMEOUT_SECONDS,
        )
    except LLMServiceError as e:
        logger.error("Suggestions error: %s", e)
        raise llm_failure_to_http(
            e,
            timeout_message="Request timed out. Please try again.",
            generic_message="Failed to generate suggestions. Please try again later.",
        )

    if not raw:
        raise HTTPException(status_code=500, detail="AI service returned an empty response")

    items = parse_suggestions(raw)
    if not items:
        raise HTTPException(status_code=500, detail="No valid suggestions generated")

    return SuggestionsResponse(suggestions=items, document_type=document_type)
