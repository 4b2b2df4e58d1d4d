# Implements security-related functionality:
# JWT access token generation and verification
# Refresh token generation
# Password hashing and verification using bcrypt
# Provides core security functions used by the authentication module

from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import secrets
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext

from threadboard.core.config import settings

logger = logging.getLogger("threadboard")

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def create_access_token(user_id: str, username: str, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is not None:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": expire, "sub": str(user_id), "username": username}
    if settings.JWT_ISSUER:
        to_encode["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

def create_refresh_token() -> str:
    return secrets.token_urlsafe(settings.REFRESH_TOKEN_BYTES)

def refresh_token_expiry() -> datetime:
    return datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_access_token(token: str) -> Optional[str]:
    """Return the user id of a valid, unexpired access token, else None"""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        return None

    user_id = payload.get("sub")
    if user_id is None:
        logger.warning("Token payload missing 'sub' field")
        return None
    return user_id

def decode_expired_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify the signature of an access token that is expected to be expired.

    Lifetime, issuer and audience are not checked; the header algorithm must
    match the configured one exactly. Returns the claims, or None when the
    token cannot be trusted.
    """
    try:
        header = jwt.get_unverified_header(token)
        alg = header.get("alg")
        if not isinstance(alg, str) or alg.upper() != settings.ALGORITHM.upper():
            logger.warning(f"Unexpected token algorithm: {alg!r}")
            return None
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": False, "verify_aud": False, "verify_iss": False},
        )
    except JWTError as e:
        logger.warning(f"Rejected access token on refresh: {e}")
        return None
