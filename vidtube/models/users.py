import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Uuid

from vidtube.db.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Users(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    username = Column(String(64), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)

    avatar = Column(String, nullable=False)
    avatar_public_id = Column(String, nullable=True)
    cover_image = Column(String, nullable=True)
    cover_image_public_id = Column(String, nullable=True)

    password_hash = Column(String, nullable=False)
    refresh_token = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
