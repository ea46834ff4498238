from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class StudentResponse(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class StudentInviteRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr


class StudentInviteResponse(BaseModel):
    message: str
    user_id: int
    expires_at: datetime
    # Development only, see ALLOW_DEV_RESET_TOKEN
    debug_reset_token: Optional[str] = None


class ProgressAttempt(BaseModel):
    id: int
    title: str
    score: float
    total_questions: int
    attempted_at: Optional[datetime] = None


class StudentProgressResponse(BaseModel):
    student: StudentResponse
    attempts: List[ProgressAttempt]
