from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func

from threadboard.core.exceptions import NotFoundError, ForbiddenError, InvalidStateError
from threadboard.modules.posts.models.post import Post, PostState
from threadboard.modules.posts.schemas.post import (
    PostCreate, PostUpdate, Post as PostSchema, PostDetail
)
from threadboard.modules.user_management.schemas.user import User as UserSchema

logger = logging.getLogger("threadboard")

DELETED_PLACEHOLDER = "[deleted]"

def count_replies(db: Session, post_id: int) -> int:
    """Count direct replies of a post"""
    return db.query(func.count(Post.id)).filter(Post.parent_id == post_id).scalar() or 0

def count_replies_by_parent(db: Session, post_ids: Iterable[int]) -> Dict[int, int]:
    """Count direct replies for many posts in one grouped query"""
    post_ids = list(post_ids)
    if not post_ids:
        return {}
    rows = (
        db.query(Post.parent_id, func.count(Post.id))
        .filter(Post.parent_id.in_(post_ids))
        .group_by(Post.parent_id)
        .all()
    )
    return {parent_id: count for parent_id, count in rows}

def to_schema(db: Session, post: Post, comments_count: Optional[int] = None) -> PostSchema:
    """
    Project a post for clients. Deleted posts keep their id, timestamps and
    thread position but never expose content or author.
    """
    if post.is_deleted:
        content, user_id, user = DELETED_PLACEHOLDER, None, None
    else:
        content, user_id = post.content, post.author_id
        user = UserSchema.model_validate(post.author) if post.author else None

    if comments_count is None:
        comments_count = count_replies(db, post.id)

    return PostSchema(
        id=post.id,
        content=content,
        created_at=post.created_at,
        user_id=user_id,
        user=user,
        is_deleted=post.is_deleted,
        parent_id=post.parent_id,
        comments_count=comments_count,
    )

def to_schemas(db: Session, posts: List[Post]) -> List[PostSchema]:
    counts = count_replies_by_parent(db, [post.id for post in posts])
    return [to_schema(db, post, counts.get(post.id, 0)) for post in posts]

def _get_post_or_raise(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if post is None:
        raise NotFoundError(f"Post with id {post_id} not found.")
    return post

def get_posts(db: Session, skip: int = 0, limit: Optional[int] = None) -> List[PostSchema]:
    """Get top-level posts, newest first, with reply counts"""
    logger.info(f"Getting top-level posts with skip={skip}, limit={limit}")
    query = (
        db.query(Post)
        .options(joinedload(Post.author))
        .filter(Post.parent_id.is_(None))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset(skip)
    )
    if limit is not None:
        query = query.limit(limit)
    return to_schemas(db, query.all())

def get_replies(db: Session, post_id: int) -> List[Post]:
    """Get direct replies to a post, oldest first"""
    return (
        db.query(Post)
        .options(joinedload(Post.author))
        .filter(Post.parent_id == post_id)
        .order_by(Post.created_at.asc(), Post.id.asc())
        .all()
    )

def get_post(db: Session, post_id: int) -> PostDetail:
    """Get a post with its parent summary and direct replies"""
    logger.info(f"Getting post with ID: {post_id}")
    post = _get_post_or_raise(db, post_id)

    parent = to_schema(db, post.parent) if post.parent is not None else None
    replies = to_schemas(db, get_replies(db, post.id))

    return PostDetail(
        **to_schema(db, post, comments_count=len(replies)).model_dump(),
        parent=parent,
        replies=replies,
    )

def create_post(db: Session, post_in: PostCreate, author_id: str) -> PostSchema:
    """Create a top-level post or a reply to an existing, non-deleted post"""
    logger.info(f"Creating post for author ID: {author_id}")
    if post_in.parent_id is not None:
        parent_exists = (
            db.query(Post.id)
            .filter(Post.id == post_in.parent_id, Post.is_deleted.is_(False))
            .first()
        )
        if not parent_exists:
            raise NotFoundError(f"Parent post with id {post_in.parent_id} not found.")

    post = Post(
        content=post_in.content,
        author_id=author_id,
        parent_id=post_in.parent_id,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return to_schema(db, post)

def update_post(db: Session, post_id: int, post_in: PostUpdate, requester_id: str) -> PostSchema:
    """Replace the content of a live post owned by the requester"""
    logger.info(f"Updating post with ID: {post_id}")
    post = _get_post_or_raise(db, post_id)

    if post.state is PostState.DELETED:
        raise InvalidStateError()

    if post.author_id != requester_id:
        raise ForbiddenError("You are not authorized to edit this post.")

    post.content = post_in.content
    db.commit()
    db.refresh(post)
    return to_schema(db, post)

def delete_post(db: Session, post_id: int, requester_id: str) -> None:
    """
    Delete a post owned by the requester.

    A post that still has replies is only flagged deleted so the thread stays
    intact; a post without replies is removed for good. Replies are counted
    at delete time.
    """
    logger.info(f"Deleting post with ID: {post_id}")
    post = _get_post_or_raise(db, post_id)

    if post.author_id != requester_id:
        raise ForbiddenError("You are not authorized to delete this post.")

    if count_replies(db, post.id) > 0:
        if post.state is PostState.ACTIVE:
            post.transition_to(PostState.DELETED)
        logger.info(f"Post {post_id} has replies, marked as deleted")
    else:
        db.delete(post)
        logger.info(f"Post {post_id} removed")
    db.commit()
