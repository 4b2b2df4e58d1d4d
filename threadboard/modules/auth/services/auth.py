import uuid
import logging
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from threadboard.core import security
from threadboard.core.exceptions import AlreadyExistsError, InvalidCredentialsError, InvalidTokenError
from threadboard.modules.auth.schemas.auth import UserAuth, TokenPair, RefreshTokenRequest
from threadboard.modules.user_management.models.user import User
from threadboard.modules.user_management.services.user import get_user_by_username

logger = logging.getLogger("threadboard")

def register_user(db: Session, user_in: UserAuth) -> User:
    """Create a user with a hashed password; usernames are unique"""
    if get_user_by_username(db, username=user_in.username):
        raise AlreadyExistsError()

    user = User(
        id=str(uuid.uuid4()),
        username=user_in.username,
        hashed_password=security.get_password_hash(user_in.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent registration claimed the username after the check above
        db.rollback()
        raise AlreadyExistsError()
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user

def _issue_tokens(db: Session, user: User) -> TokenPair:
    """Sign a new access token and replace the user's stored refresh token"""
    access_token = security.create_access_token(user.id, user.username)
    refresh_token = security.create_refresh_token()

    user.refresh_token = refresh_token
    user.refresh_token_expiry_time = security.refresh_token_expiry()
    db.commit()

    return TokenPair(access_token=access_token, refresh_token=refresh_token)

def login(db: Session, user_in: UserAuth) -> TokenPair:
    """Verify credentials and start a new session, revoking any previous refresh token"""
    user = get_user_by_username(db, username=user_in.username)
    if user is None:
        logger.info("Login rejected: unknown username")
        raise InvalidCredentialsError()

    if not security.verify_password(user_in.password, user.hashed_password):
        logger.info(f"Login rejected: bad password for user {user.id}")
        raise InvalidCredentialsError()

    return _issue_tokens(db, user)

def refresh_tokens(db: Session, request: RefreshTokenRequest) -> TokenPair:
    """
    Exchange an (expired) access token and the current refresh token for a new pair.

    The access token only has to carry a valid signature; its lifetime is
    ignored. The refresh token must equal the one stored for the user and
    must not have expired. Both tokens are rotated on success.
    """
    claims = security.decode_expired_access_token(request.access_token)
    if claims is None:
        raise InvalidTokenError()

    username = claims.get("username")
    if not username:
        logger.warning("Access token carries no username claim")
        raise InvalidTokenError()

    user = get_user_by_username(db, username=username)
    if (
        user is None
        or user.refresh_token is None
        or user.refresh_token != request.refresh_token
        or user.refresh_token_expiry_time is None
        or user.refresh_token_expiry_time <= datetime.utcnow()
    ):
        raise InvalidTokenError()

    return _issue_tokens(db, user)
