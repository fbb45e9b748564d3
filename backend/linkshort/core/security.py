from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..repositories import SqlUserRepository
from .errors import AuthenticationError, ForbiddenError

# Password hashing
# Use bcrypt 4.x compatible settings
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12
)

# Bearer token is optional: the dashboard authenticates with an HTTP-only cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """The authenticated caller, passed explicitly to services"""
    user_id: str
    email: str
    tier: str
    is_admin: bool = False


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception:
        # Fallback for bcrypt releases passlib cannot drive
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password
            )
        except ValueError:
            return False


def get_password_hash(password: str) -> str:
    """Hash a password"""
    try:
        return pwd_context.hash(password)
    except Exception:
        # Fallback for bcrypt releases passlib cannot drive
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data to encode in the token
        expires_delta: Token expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except InvalidTokenError:
        raise AuthenticationError()

    if not payload.get("sub"):
        raise AuthenticationError()

    return payload


def _token_from_request(request: Request, bearer: Optional[str]) -> Optional[str]:
    return bearer or request.cookies.get(settings.AUTH_COOKIE_NAME)


async def get_optional_principal(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> Optional[AuthenticatedPrincipal]:
    """
    Resolve the caller from a bearer token or the auth cookie.

    The tier is read from the user row, not the token, so upgrades apply
    without re-login.

    Returns:
        The principal, or None for anonymous requests

    Raises:
        AuthenticationError: If a token is present but invalid
    """
    token = _token_from_request(request, token)
    if not token:
        return None

    payload = decode_access_token(token)
    user = await SqlUserRepository(db).get(payload["sub"])

    if user is None:
        raise AuthenticationError()

    return AuthenticatedPrincipal(
        user_id=user.id,
        email=user.email,
        tier=user.tier,
        is_admin=user.is_admin,
    )


async def get_current_principal(
    principal: Optional[AuthenticatedPrincipal] = Depends(get_optional_principal)
) -> AuthenticatedPrincipal:
    """Require an authenticated caller"""
    if principal is None:
        raise AuthenticationError("Not authenticated")
    return principal


async def get_admin_principal(
    principal: AuthenticatedPrincipal = Depends(get_current_principal)
) -> AuthenticatedPrincipal:
    """Require an authenticated admin"""
    if not principal.is_admin:
        raise ForbiddenError("Not enough permissions")
    return principal
