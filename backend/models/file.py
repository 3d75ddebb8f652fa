"""Uploaded file model definitions."""

from sqlalchemy import Column, Integer, String

from backend.core import config
from backend.database import Base


class File(Base):
    """Represents an uploaded file, such as a provider avatar."""
    __tablename__ = "files"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    path = Column(String, unique=True, nullable=False)

    @property
    def url(self) -> str:
        return f"{config.APP_URL}/files/{self.path}"
