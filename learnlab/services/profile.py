from sqlalchemy.orm import Session

from learnlab.core.exceptions import AuthenticationError, NotFoundError
from learnlab.core.security import AuthSession, hash_password, verify_password
from learnlab.repositories.profile_repository import ProfileRepository
from learnlab.repositories.user_repository import UserRepository
from learnlab.schemas.profile import PasswordChangeRequest, ProfileResponse, ProfileUpdate


class ProfileService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)
        self.profile_repository = ProfileRepository(db)

    def get_profile(self, session: AuthSession) -> ProfileResponse:
        user = self.user_repository.get_by_id(session.user_id)
        if user is None:
            raise NotFoundError("User not found")
        profile = self.profile_repository.get_by_user_id(user.id)
        return ProfileResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
            bio=(profile.bio if profile else None) or "",
            phone=(profile.phone if profile else None) or "",
        )

    def update_profile(self, session: AuthSession, request: ProfileUpdate) -> None:
        self.profile_repository.upsert(
            session.user_id, bio=request.bio or "", phone=request.phone or ""
        )

    def change_password(self, session: AuthSession, request: PasswordChangeRequest) -> None:
        user = self.user_repository.get_by_id(session.user_id)
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(request.currentPassword, user.password):
            raise AuthenticationError("Current password is incorrect")
        self.user_repository.update_password(user, hash_password(request.newPassword))
