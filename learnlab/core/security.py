import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from learnlab.core.config import settings
from learnlab.core.database import get_db
from learnlab.core.exceptions import AuthenticationError, AuthorizationError
from learnlab.models.user import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthSession:
    """The authenticated caller, resolved once per request"""

    user_id: int
    email: str
    name: str
    role: str

    @property
    def is_faculty(self) -> bool:
        return self.role == "faculty"

    @property
    def is_student(self) -> bool:
        return self.role == "student"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def new_reset_token() -> Tuple[str, str]:
    """Return (raw_token, sha256 digest). Only the digest may be persisted."""
    raw_token = secrets.token_hex(32)
    return raw_token, hash_reset_token(raw_token)


def reset_token_matches(raw_token: str, stored_digest: str) -> bool:
    return hmac.compare_digest(hash_reset_token(raw_token), stored_digest)


def random_password() -> str:
    return secrets.token_hex(16)


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthSession:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("No token provided")

    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")

    # Tokens of deleted accounts stop working immediately
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthenticationError("Invalid or expired token")

    return AuthSession(user_id=user.id, email=user.email, name=user.name, role=user.role)


def require_role(*roles: str):
    """Dependency factory gating an endpoint to the given roles"""

    def dependency(session: AuthSession = Depends(get_current_session)) -> AuthSession:
        if session.role not in roles:
            raise AuthorizationError("Insufficient permissions")
        return session

    return dependency
