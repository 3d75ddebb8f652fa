from datetime import datetime

from sqlalchemy.orm import Session

from backend.models.notification import Notification

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)


def format_appointment_date(value: datetime) -> str:
    """Render a date as ``day 10 of March, at 14:00h``."""
    return f"day {value:%d} of {MONTH_NAMES[value.month - 1]}, at {value.hour}:{value:%M}h"


def build_notification_content(user_name: str, appointment_date: datetime) -> str:
    return f"New appointment from {user_name} for {format_appointment_date(appointment_date)}"


def notify_provider(db: Session, provider_id: int, content: str) -> Notification:
    notification = Notification(content=content, user=provider_id)
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification
