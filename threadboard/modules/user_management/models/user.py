from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from threadboard.db.session import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    # Single active refresh token per user; overwritten on login and refresh
    refresh_token = Column(String, nullable=True)
    refresh_token_expiry_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now())
