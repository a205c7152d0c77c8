from fastapi import APIRouter

from paperchat.models.schemas import SampleResponse
from paperchat.services.sample import SAMPLE_DOCUMENT_TEXT, SAMPLE_FILENAME

router = APIRouter()


@router.get("/sample", response_model=SampleResponse)
async def sample() -> SampleResponse:
    """Fixed document for demo mode."""
    return SampleResponse(text=SAMPLE_DOCUMENT_TEXT, pages=1, filename=SAMPLE_FILENAME, is_demo=True)
