import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from paperchat.models.schemas import FeedbackResponse, FeedbackStats
from paperchat.services.feedback_store import FEEDBACK_VALUES, FeedbackStore, get_feedback_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/feedback", response_model=FeedbackResponse)
async def feedback(body: Dict[str, Any], store: FeedbackStore = Depends(get_feedback_store)) -> FeedbackResponse:
    message_id = body.get("messageId")
    value = body.get("feedback")

    if not message_id or not value:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if value not in FEEDBACK_VALUES:
        raise HTTPException(status_code=400, detail="Invalid feedback type")

    counts = store.increment(str(message_id), value)
    logger.info(
        "feedback message_id=%s value=%s helpful=%d total=%d helpful_pct=%d",
        message_id, value, counts.helpful, counts.total, counts.helpful_percentage,
    )

    return FeedbackResponse(
        message_id=str(message_id),
        feedback=value,
        stats=FeedbackStats(**counts.to_stats()),
    )
