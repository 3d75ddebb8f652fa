from datetime import datetime

from sqlalchemy.orm import Session

from backend.models.appointment import Appointment


def is_available(db: Session, provider_id: int, date: datetime) -> bool:
    """True when the provider has no active appointment at exactly ``date``."""
    occupied = db.query(Appointment.id).filter(
        Appointment.provider_id == provider_id,
        Appointment.date == date,
        Appointment.canceled_at.is_(None),
    ).first()
    return occupied is None
