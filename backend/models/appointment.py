"""Appointment model definitions."""

from datetime import datetime, timedelta

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, text
from sqlalchemy.orm import relationship

from backend.core import config
from backend.database import Base
from backend.models.user import User

ACTIVE_SLOT_PREDICATE = text("canceled_at IS NULL")


class Appointment(Base):
    """Represents a booking of a provider slot by a user."""
    __tablename__ = "appointments"
    __table_args__ = (
        # One active appointment per provider slot; canceled rows free the slot.
        Index(
            "uq_appointments_provider_date_active",
            "provider_id",
            "date",
            unique=True,
            sqlite_where=ACTIVE_SLOT_PREDICATE,
            postgresql_where=ACTIVE_SLOT_PREDICATE,
        ),
        Index("idx_appointments_user_date", "user_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(DateTime, nullable=False)
    canceled_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.now)

    user = relationship(User, foreign_keys=[user_id])
    provider = relationship(User, foreign_keys=[provider_id])

    @property
    def past(self) -> bool:
        return self.date < datetime.now()

    @property
    def cancelable(self) -> bool:
        deadline = self.date - timedelta(hours=config.CANCELLATION_WINDOW_HOURS)
        return self.canceled_at is None and datetime.now() < deadline
