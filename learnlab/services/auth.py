import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnlab.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from learnlab.core.security import (
    AuthSession,
    create_access_token,
    hash_password,
    hash_reset_token,
    reset_token_matches,
    verify_password,
)
from learnlab.repositories.user_repository import PasswordResetRepository, UserRepository
from learnlab.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.user_repository = UserRepository(db)
        self.reset_repository = PasswordResetRepository(db)

    def signup(self, request: SignupRequest) -> AuthResponse:
        if self.user_repository.get_by_email(request.email) is not None:
            raise ValidationError("Email already exists")
        try:
            user = self.user_repository.create(
                {
                    "email": request.email,
                    "password": hash_password(request.password),
                    "name": request.name,
                    "role": request.role,
                }
            )
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("Email already exists")

        return AuthResponse(
            user=UserResponse.model_validate(user), token=create_access_token(user)
        )

    def login(self, request: LoginRequest) -> AuthResponse:
        user = self.user_repository.get_by_email(request.email)
        if user is None:
            logger.info(f"Login attempt: user not found for email: {request.email}")
            raise AuthenticationError("Invalid credentials")
        if not verify_password(request.password, user.password):
            logger.info(f"Login attempt: invalid password for email: {request.email}")
            raise AuthenticationError("Invalid credentials")

        logger.info(f"Login successful for: {user.email} (role: {user.role})")
        return AuthResponse(
            user=UserResponse.model_validate(user), token=create_access_token(user)
        )

    def reset_password(self, request: ResetPasswordRequest) -> None:
        if len(request.new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Invalid token or password too short")

        reset = self.reset_repository.get_active_by_digest(
            hash_reset_token(request.token), datetime.now(timezone.utc)
        )
        if reset is None or not reset_token_matches(request.token, reset.token):
            raise ValidationError("Invalid or expired token")

        user = self.user_repository.get_by_id(reset.user_id)
        if user is None:
            raise ValidationError("Invalid or expired token")

        self.reset_repository.consume(reset, user, hash_password(request.new_password))
        logger.info(f"Password reset completed for user {user.id}")

    def me(self, session: AuthSession) -> UserResponse:
        user = self.user_repository.get_by_id(session.user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserResponse.model_validate(user)
