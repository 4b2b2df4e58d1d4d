from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from threadboard.core import security
from threadboard.db.session import get_db
from threadboard.modules.user_management.models.user import User
from threadboard.modules.user_management.services.user import get_user

# Login takes a JSON body, so only the bearer header is described to OpenAPI
bearer_scheme = HTTPBearer(auto_error=False)

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Dependency for getting current authenticated user
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = security.verify_access_token(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    user = get_user(db, user_id=user_id)
    if not user:
        raise _unauthorized("User not found")

    return user
