# Import all models here so Alembic can detect them
from threadboard.db.session import Base

from threadboard.modules.user_management.models.user import User
from threadboard.modules.posts.models.post import Post
