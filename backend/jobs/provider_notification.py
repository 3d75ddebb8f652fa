import logging
from datetime import datetime

from backend.models.appointment import Appointment
from backend.services.notifications import build_notification_content, notify_provider

logger = logging.getLogger(__name__)

PROVIDER_NOTIFICATION_KEY = 'ProviderNotification'


async def dispatch_provider_notification(queue, appointment: Appointment, user_name: str) -> None:
    await queue.enqueue(
        PROVIDER_NOTIFICATION_KEY,
        {
            'appointment_id': appointment.id,
            'provider_id': appointment.provider_id,
            'user_name': user_name,
            'date': appointment.date.isoformat(),
        },
    )


async def create_provider_notification(ctx: dict, payload: dict) -> None:
    content = build_notification_content(payload['user_name'], datetime.fromisoformat(payload['date']))

    db = ctx['session_factory']()
    try:
        notification = notify_provider(db, payload['provider_id'], content)
    finally:
        db.close()

    logger.info(
        'Created notification %s for provider %s (appointment %s)',
        notification.id,
        payload['provider_id'],
        payload['appointment_id'],
    )
