import enum

from sqlalchemy import Boolean, Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from threadboard.core.exceptions import InvalidStateError
from threadboard.db.session import Base
from threadboard.modules.user_management.models.user import User

class PostState(str, enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"

# A deleted post never comes back
ALLOWED_TRANSITIONS = {
    PostState.ACTIVE: {PostState.DELETED},
    PostState.DELETED: set(),
}

class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    content = Column(Text, nullable=False)
    author_id = Column(String, ForeignKey("users.id"), nullable=False)
    parent_id = Column(Integer, ForeignKey("posts.id"), nullable=True, index=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now())

    author = relationship(User)
    parent = relationship("Post", remote_side=[id])

    @property
    def state(self) -> PostState:
        return PostState.DELETED if self.is_deleted else PostState.ACTIVE

    def transition_to(self, target: PostState) -> None:
        if target not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidStateError(f"Cannot move post {self.id} from {self.state.value} to {target.value}")
        self.is_deleted = target is PostState.DELETED
