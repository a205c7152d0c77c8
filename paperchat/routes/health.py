from fastapi import APIRouter, Query
import httpx
from paperchat.core.config import settings
from paperchat.core.errors import ConfigurationError
from paperchat.models.schemas import HealthModel
from paperchat.services.llm_client import require_api_key

router = APIRouter()


def _key_configured() -> bool:
    try:
        require_api_key(settings.OPENAI_API_KEY)
    except ConfigurationError:
        return False
    return True


@router.get("/health", response_model=HealthModel)
async def health(probe: bool = Query(default=False)) -> HealthModel:
    key_ok = _key_configured()
    agent_ok = None

    # Reaching out to the provider is opt-in; it costs a request per call
    if probe and key_ok:
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                r = await client.get(
                    f"{settings.AGENT_BASE_URL}/models",
                    headers={"Authorization": f"Bearer {settings.OPENAI_API_KEY}"},
                )
            agent_ok = r.status_code == 200
        except httpx.HTTPError:
            agent_ok = False

    healthy = key_ok and agent_ok is not False
    return HealthModel(
        status="ok" if healthy else "degraded",
        agent_model=settings.AGENT_MODEL,
        api_key_configured=key_ok,
        agent_reachable=agent_ok,
    )


@router.get("/config")
async def get_config():
    return {
        "agent_base_url": settings.AGENT_BASE_URL,
        "agent_model": settings.AGENT_MODEL,
        "max_file_size_mb": settings.MAX_FILE_SIZE_MB,
        "max_message_chars": settings.MAX_MESSAGE_CHARS,
        "max_document_chars": settings.MAX_DOCUMENT_CHARS,
        "max_retries": settings.MAX_RETRIES,
        "cors_origins": settings.CORS_ORIGINS,
    }
