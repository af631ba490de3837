import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_name = Column(String(50), unique=True, nullable=False, index=True)  # stored lower-case
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), nullable=False, default="")
    password = Column(String(255), nullable=False)
    avatar_url = Column(String(512), nullable=False)
    avatar_public_id = Column(String(255), nullable=True)
    cover_image_url = Column(String(512), nullable=False, default="")
    cover_image_public_id = Column(String(255), nullable=True)
    refresh_token = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
