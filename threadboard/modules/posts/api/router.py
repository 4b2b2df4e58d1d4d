from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from threadboard.db.session import get_db
from threadboard.deps import get_current_user
from threadboard.core.exceptions import NotFoundError, ForbiddenError, InvalidStateError
from threadboard.modules.user_management.models.user import User
from threadboard.modules.posts.schemas.post import Post as PostSchema, PostDetail, PostCreate, PostUpdate
from threadboard.modules.posts.services.post import (
    get_post, get_posts, create_post, update_post, delete_post
)

logger = logging.getLogger("threadboard")

router = APIRouter()

@router.get("", response_model=List[PostSchema])
def read_posts(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1, le=200),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Retrieve top-level posts, newest first, with reply counts.
    """
    return get_posts(db, skip=skip, limit=limit)

@router.get("/{post_id}", response_model=PostDetail)
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get post by ID together with its parent and direct replies.
    """
    try:
        return get_post(db, post_id=post_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )

@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
def create_new_post(
    *,
    db: Session = Depends(get_db),
    request: Request,
    response: Response,
    post_in: PostCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Create a new post, or a reply when parentId is given.
    """
    try:
        post = create_post(db, post_in, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )
    response.headers["Location"] = str(request.url_for("read_post_by_id", post_id=str(post.id)))
    return post

@router.put("/{post_id}", response_model=PostSchema)
def update_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: int,
    post_in: PostUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Update the content of a post. Only the author may edit, and only while the post is not deleted.
    """
    try:
        return update_post(db, post_id, post_in, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )
    except InvalidStateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: int,
    current_user: User = Depends(get_current_user),
) -> Response:
    """
    Delete a post. Posts that already have replies are kept as a "[deleted]"
    placeholder so the thread stays readable; all others are removed.
    """
    try:
        delete_post(db, post_id, current_user.id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        )
    except ForbiddenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=e.message,
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
