import asyncio
from datetime import datetime

from backend.jobs.cancellation_mail import send_cancellation_mail
from backend.jobs.provider_notification import (
    PROVIDER_NOTIFICATION_KEY,
    create_provider_notification,
    dispatch_provider_notification,
)
from backend.jobs.registry import build_job_registry
from backend.models.appointment import Appointment
from backend.models.notification import Notification


def test_dispatch_and_handle_provider_notification(appointment_db, session_factory, queue, make_user) -> None:
    customer = make_user('Ana Souza', 'ana@example.com')
    provider = make_user('Bruno Lima', 'bruno@example.com', provider=True)
    appointment = Appointment(user_id=customer.id, provider_id=provider.id, date=datetime(2025, 3, 10, 14, 0))
    appointment_db.add(appointment)
    appointment_db.commit()
    appointment_db.refresh(appointment)

    asyncio.run(dispatch_provider_notification(queue, appointment, customer.name))
    job_key, payload = queue.jobs[0]
    asyncio.run(create_provider_notification({'session_factory': session_factory}, payload))

    assert job_key == PROVIDER_NOTIFICATION_KEY
    notification = appointment_db.query(Notification).one()
    assert notification.user == provider.id
    assert notification.content == 'New appointment from Ana Souza for day 10 of March, at 14:00h'


def test_registry_maps_every_job_key_to_its_handler() -> None:
    registry = build_job_registry()

    assert registry == {
        'CancellationMail': send_cancellation_mail,
        PROVIDER_NOTIFICATION_KEY: create_provider_notification,
    }
