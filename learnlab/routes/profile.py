from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from learnlab.core.database import get_db
from learnlab.core.security import AuthSession, get_current_session
from learnlab.schemas.common import MessageResponse
from learnlab.schemas.profile import PasswordChangeRequest, ProfileResponse, ProfileUpdate
from learnlab.services.profile import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(
    session: AuthSession = Depends(get_current_session), db: Session = Depends(get_db)
):
    return ProfileService(db).get_profile(session)


@router.put("/password", response_model=MessageResponse)
def change_password(
    request: PasswordChangeRequest,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    ProfileService(db).change_password(session, request)
    return MessageResponse(message="Password updated successfully")


@router.put("", response_model=MessageResponse)
def update_profile(
    request: ProfileUpdate,
    session: AuthSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    ProfileService(db).update_profile(session, request)
    return MessageResponse(message="Profile updated successfully")
