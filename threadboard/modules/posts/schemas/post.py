from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from threadboard.modules.user_management.schemas.user import User

class PostBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class PostCreate(PostBase):
    content: str = Field(..., min_length=1)
    parent_id: Optional[int] = None

class PostUpdate(PostBase):
    content: str = Field(..., min_length=1)

class Post(PostBase):
    """Post model returned to client; content and author are masked once deleted"""
    id: int
    content: str
    created_at: datetime
    user_id: Optional[str] = None
    user: Optional[User] = None
    is_deleted: bool = False
    parent_id: Optional[int] = None
    comments_count: int = 0

class PostDetail(Post):
    """Single post with its parent summary and direct replies"""
    parent: Optional[Post] = None
    replies: List[Post] = []
