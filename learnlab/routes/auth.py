from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, get_current_session
from learnlab.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
)
from learnlab.schemas.common import MessageResponse
from learnlab.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(request: SignupRequest, db: Session = Depends(get_db)):
    return AuthService(db).signup(request)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    return AuthService(db).login(request)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(request: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password with a one-time token issued at invitation"""
    AuthService(db).reset_password(request)
    return MessageResponse(message="Password updated")


@router.get("/me", response_model=UserResponse)
def me(session: AuthSession = Depends(get_current_session), db: Session = Depends(get_db)):
    return AuthService(db).me(session)
