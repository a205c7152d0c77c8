from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


# --------------------
# Core API Schemas
# --------------------

class UploadResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str
    pages: int
    filename: str


class SampleResponse(UploadResponse):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    is_demo: bool = Field(default=True, alias="isDemo")


class ChatResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    response: str
    message_id: str = Field(alias="messageId")


class SuggestionsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    suggestions: List[str]
    document_type: str = Field(default="general", alias="documentType")


class FeedbackStats(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    helpful: int
    unhelpful: int
    total: int
    helpful_percentage: int = Field(alias="helpfulPercentage")


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: bool = True
    message_id: str = Field(alias="messageId")
    feedback: str
    stats: FeedbackStats


class HealthModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str
    agent_model: str
    api_key_configured: bool
    agent_reachable: Optional[bool] = None
