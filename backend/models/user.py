"""User model definitions."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.file import File


class User(Base):
    """Represents an application user; providers can receive bookings."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String)
    provider = Column(Boolean, nullable=False, default=False)
    avatar_id = Column(Integer, ForeignKey("files.id"))

    avatar = relationship(File, lazy="joined")
