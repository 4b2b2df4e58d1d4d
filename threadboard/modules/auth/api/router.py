"""Authentication router: registration, login and token refresh"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from threadboard.db.session import get_db
from threadboard.core.exceptions import AlreadyExistsError, InvalidCredentialsError, InvalidTokenError
from threadboard.modules.auth.schemas.auth import UserAuth, TokenPair, RefreshTokenRequest
from threadboard.modules.auth.services.auth import register_user, login, refresh_tokens
from threadboard.modules.user_management.schemas.user import User as UserSchema

router = APIRouter()
logger = logging.getLogger("threadboard")

@router.post("/register", response_model=UserSchema)
def register(
    *,
    db: Session = Depends(get_db),
    user_in: UserAuth,
) -> UserSchema:
    """Register a new user"""
    try:
        return register_user(db, user_in)
    except AlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

@router.post("/login", response_model=TokenPair)
def login_for_tokens(
    *,
    db: Session = Depends(get_db),
    user_in: UserAuth,
) -> TokenPair:
    """Authenticate with username and password and receive a token pair"""
    try:
        return login(db, user_in)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

@router.post("/refresh-token", response_model=TokenPair)
def refresh_token(
    *,
    db: Session = Depends(get_db),
    token_in: RefreshTokenRequest,
) -> TokenPair:
    """Rotate an expired access token and its refresh token"""
    try:
        return refresh_tokens(db, token_in)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
