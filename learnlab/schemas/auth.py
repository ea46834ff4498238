from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

# ============================================================================
# Request Schemas
# ============================================================================


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    # Admin accounts are provisioned by seeding only
    role: Literal["student", "faculty"]


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1, description="One-time reset token")
    new_password: str = Field(..., description="New password, at least 8 characters")


# ============================================================================
# Response Schemas
# ============================================================================


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    require_password_change: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    user: UserResponse
    token: str = Field(..., description="Bearer token for the Authorization header")
