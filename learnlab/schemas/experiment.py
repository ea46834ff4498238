from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ExperimentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    youtube_url: str = Field(..., min_length=1, description="Reference video URL")
    explanation: Optional[str] = Field(
        None, description="Explanation text; generated from the video when blank"
    )


class ExperimentUpdate(BaseModel):
    name: Optional[str] = None
    youtube_url: Optional[str] = None
    explanation: Optional[str] = None


class ExperimentResponse(BaseModel):
    id: int
    name: str
    youtube_url: str
    explanation: Optional[str] = None
    faculty_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
