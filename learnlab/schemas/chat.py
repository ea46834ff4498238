from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request schema for asking the tutor about an experiment"""

    experiment_id: int = Field(..., gt=0)
    message: str = Field(..., description="Student's question")


class ChatResponse(BaseModel):
    message: str = Field(..., description="The question that was asked")
    response: str = Field(..., description="Tutor's answer")


class ChatHistoryItem(BaseModel):
    id: int
    user_message: str
    ai_response: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChatHistoryResponse(BaseModel):
    messages: List[ChatHistoryItem]


class AIStatusResponse(BaseModel):
    hasKey: bool = Field(..., description="Whether the AI service is configured")
