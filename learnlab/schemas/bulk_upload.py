from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class RosterRow(BaseModel):
    """A roster entry after per-row coercion; blank fields fail only that row"""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class BulkUploadRequest(BaseModel):
    students: Optional[List[Any]] = Field(
        None, description="Roster entries; malformed entries fail individually"
    )
    filename: Optional[str] = Field(None, description="Source file name for the audit log")


class Invite(BaseModel):
    email: str
    user_id: int
    expires_at: datetime


class BulkUploadResponse(BaseModel):
    total: int
    successful: int
    failed: int
    errors: List[str] = Field(..., description="Up to 10 sample error messages")
    invites: List[Invite]


class BulkUploadHistoryItem(BaseModel):
    id: int
    filename: str
    total_students: int
    successful_uploads: int
    failed_uploads: int
    status: str
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True
