from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from learnlab.models.user import PasswordReset, User


class UserRepository:
    """Repository for User database operations following DDD pattern"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get a user by ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email"""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id_and_role(self, user_id: int, role: str) -> Optional[User]:
        return (
            self.db.query(User).filter(User.id == user_id, User.role == role).first()
        )

    def list_by_role(self, role: str) -> List[User]:
        """Get all users with the given role"""
        return self.db.query(User).filter(User.role == role).order_by(User.id).all()

    def create(self, user_data: dict) -> User:
        """Create a new user"""
        db_user = User(**user_data)
        self.db.add(db_user)
        self.db.commit()
        self.db.refresh(db_user)
        return db_user

    def create_with_reset_token(
        self, user_data: dict, token_digest: str, expires_at: datetime
    ) -> User:
        """Create a user and its password reset token in one transaction"""
        db_user = User(**user_data)
        try:
            self.db.add(db_user)
            self.db.flush()
            self.db.add(
                PasswordReset(user_id=db_user.id, token=token_digest, expires_at=expires_at)
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(db_user)
        return db_user

    def update_password(
        self, user: User, password_hash: str, require_password_change: bool = False
    ) -> User:
        user.password = password_hash
        user.require_password_change = require_password_change
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> bool:
        """Delete a user"""
        self.db.delete(user)
        self.db.commit()
        return True


class PasswordResetRepository:
    """Repository for one-time password reset tokens"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_by_digest(self, token_digest: str, now: datetime) -> Optional[PasswordReset]:
        """Get an unused, unexpired reset token by its digest"""
        reset = (
            self.db.query(PasswordReset)
            .filter(PasswordReset.token == token_digest, PasswordReset.used.is_(False))
            .first()
        )
        if reset is None:
            return None
        expires_at = reset.expires_at
        # SQLite drops tzinfo on the way back
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=now.tzinfo)
        return reset if expires_at > now else None

    def consume(self, reset: PasswordReset, user: User, password_hash: str) -> None:
        """Set the new password and burn the token in one transaction"""
        try:
            user.password = password_hash
            user.require_password_change = False
            reset.used = True
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
