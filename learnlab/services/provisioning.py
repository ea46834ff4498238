from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from learnlab.core.config import settings
from learnlab.core.exceptions import ValidationError
from learnlab.core.security import hash_password, new_reset_token, random_password
from learnlab.models.user import User
from learnlab.repositories.user_repository import UserRepository

MIN_SUPPLIED_PASSWORD_LENGTH = 8


@dataclass
class ProvisionedStudent:
    user: User
    raw_token: str
    expires_at: datetime


class StudentProvisioner:
    """Creates student accounts that must set their own password via a reset token"""

    def __init__(self, db: Session):
        self.user_repository = UserRepository(db)

    def provision(
        self, name: str, email: str, password: Optional[str] = None
    ) -> ProvisionedStudent:
        if self.user_repository.get_by_email(email) is not None:
            raise ValidationError(f"Email {email} already exists")

        supplied = (password or "").strip()
        initial_password = (
            supplied if len(supplied) >= MIN_SUPPLIED_PASSWORD_LENGTH else random_password()
        )

        raw_token, token_digest = new_reset_token()
        expires_at = datetime.now(timezone.utc) + timedelta(
            hours=settings.RESET_TOKEN_EXPIRE_HOURS
        )
        user = self.user_repository.create_with_reset_token(
            {
                "email": email,
                "password": hash_password(initial_password),
                "name": name,
                "role": "student",
                "require_password_change": True,
            },
            token_digest,
            expires_at,
        )
        return ProvisionedStudent(user=user, raw_token=raw_token, expires_at=expires_at)
