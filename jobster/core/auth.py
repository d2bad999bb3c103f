"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes and the read-only demo account
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobster.core.config import Settings, get_app_settings, get_settings
from jobster.core.errors import BadRequestError, UnauthenticatedError

# Password hashing. The hash cost is process-wide, read once from the environment
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=get_settings().bcrypt_rounds)

# Bearer token extractor (errors are raised by get_current_user instead)
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Identity decoded from the session token."""
    user_id: str
    name: str
    test_user: bool = False


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, name: str, expires_delta: Optional[timedelta] = None,
                        settings: Optional[Settings] = None) -> str:
    """Create JWT session token carrying {userId, name}."""
    settings = settings or get_settings()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode = {"userId": str(user_id), "name": name, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Optional[Settings] = None) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings)
) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user.

    Tokens are checked against the secret of the app serving the request.

    Usage:
        @router.get("/protected")
        def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication invalid")

    payload = decode_token(credentials.credentials, settings)
    if not payload or not payload.get("userId"):
        raise UnauthenticatedError("Authentication invalid")

    user_id = payload["userId"]
    return CurrentUser(
        user_id=user_id,
        name=payload.get("name", ""),
        test_user=user_id == settings.demo_user_id,
    )


async def require_write_access(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency - Reject mutations from the read-only demo account."""
    if user.test_user:
        raise BadRequestError("Test User. Read only.")
    return user
