from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class FacultyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)


class FacultyResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str = "faculty"
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
