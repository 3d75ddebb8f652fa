"""Notification model definitions."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from backend.database import Base


class Notification(Base):
    """In-app message addressed to a user."""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    content = Column(String, nullable=False)
    user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
