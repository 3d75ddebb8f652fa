import asyncio
import logging
from datetime import datetime

from backend.core import config
from backend.models.appointment import Appointment
from backend.services.notifications import format_appointment_date

logger = logging.getLogger(__name__)

CANCELLATION_MAIL_KEY = 'CancellationMail'


def build_cancellation_payload(appointment: Appointment) -> dict:
    return {
        'appointment': {
            'id': appointment.id,
            'date': appointment.date.isoformat(),
            'canceled_at': appointment.canceled_at.isoformat() if appointment.canceled_at else None,
            'provider': {
                'name': appointment.provider.name,
                'email': appointment.provider.email,
            },
            'user': {
                'name': appointment.user.name,
            },
        },
    }


async def dispatch_cancellation_job(queue, appointment: Appointment) -> None:
    await queue.enqueue(CANCELLATION_MAIL_KEY, build_cancellation_payload(appointment))


async def send_cancellation_mail(ctx: dict, payload: dict) -> None:
    """Tell the provider by email that one of their appointments was canceled."""
    appointment = payload['appointment']

    if not config.CANCELLATION_MAIL_ENABLED:
        logger.info('Cancellation mail disabled; skipping appointment %s', appointment['id'])
        return

    provider = appointment['provider']
    mailer = ctx['mailer']
    await asyncio.to_thread(
        mailer.send,
        f"{provider['name']} <{provider['email']}>",
        'cancellation',
        {
            'provider': provider['name'],
            'user': appointment['user']['name'],
            'date': format_appointment_date(datetime.fromisoformat(appointment['date'])),
        },
    )
