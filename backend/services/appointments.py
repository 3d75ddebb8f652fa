"""Booking, cancellation and listing of appointments.

An appointment is active until ``canceled_at`` is set; cancellation is the
only transition and it happens once. ``now`` is injectable so the temporal
rules can be exercised at fixed instants.
"""

import logging
from datetime import datetime, timedelta

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from backend.core import config
from backend.core.errors import (
    AlreadyCanceledError,
    ForbiddenError,
    InvalidProviderError,
    NotFoundError,
    PastDateError,
    SlotUnavailableError,
    TooLateToCancelError,
    ValidationError,
)
from backend.jobs.cancellation_mail import dispatch_cancellation_job
from backend.jobs.provider_notification import dispatch_provider_notification
from backend.models.appointment import Appointment
from backend.models.user import User
from backend.services.availability import is_available

logger = logging.getLogger(__name__)


def to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_appointment_date(raw_date) -> datetime:
    if isinstance(raw_date, datetime):
        return to_local_naive(raw_date)

    if isinstance(raw_date, str) and raw_date.strip():
        try:
            return to_local_naive(datetime.fromisoformat(raw_date.strip().replace('Z', '+00:00')))
        except ValueError as exc:
            raise ValidationError() from exc

    raise ValidationError()


def hour_start(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)


def load_appointment(db: Session, appointment_id: int) -> Appointment | None:
    return db.query(Appointment).options(
        joinedload(Appointment.provider),
        joinedload(Appointment.user),
    ).filter(Appointment.id == appointment_id).first()


def book_slot(
    db: Session,
    requester_id: int,
    provider_id,
    raw_date,
    now: datetime | None = None,
) -> tuple[Appointment, str]:
    """Validate and persist a booking; returns the appointment and the requester's name."""
    if isinstance(provider_id, bool) or not isinstance(provider_id, int):
        raise ValidationError()
    requested_date = parse_appointment_date(raw_date)

    provider = db.query(User).filter(User.id == provider_id, User.provider.is_(True)).first()
    if provider is None:
        raise InvalidProviderError()

    slot = hour_start(requested_date)
    now = now or datetime.now()

    if slot <= now:
        raise PastDateError()

    if not is_available(db, provider_id, slot):
        raise SlotUnavailableError()

    appointment = Appointment(user_id=requester_id, provider_id=provider_id, date=slot)
    db.add(appointment)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent booking took the slot between the check and the insert.
        db.rollback()
        raise SlotUnavailableError() from exc
    db.refresh(appointment)

    requester = db.get(User, requester_id)
    return appointment, requester.name if requester else ''


def mark_canceled(
    db: Session,
    requester_id: int,
    appointment_id: int,
    now: datetime | None = None,
) -> Appointment:
    appointment = load_appointment(db, appointment_id)

    if appointment is None:
        raise NotFoundError()

    if appointment.canceled_at is not None:
        raise AlreadyCanceledError()

    if appointment.user_id != requester_id:
        raise ForbiddenError()

    now = now or datetime.now()
    deadline = appointment.date - timedelta(hours=config.CANCELLATION_WINDOW_HOURS)
    if deadline <= now:
        raise TooLateToCancelError()

    appointment.canceled_at = now
    db.commit()

    # Reload with provider and user so the job payload and response need no further queries.
    return load_appointment(db, appointment_id)


async def create_appointment(
    db: Session,
    queue,
    requester_id: int,
    provider_id,
    raw_date,
    now: datetime | None = None,
) -> Appointment:
    appointment, requester_name = await run_in_threadpool(
        book_slot, db, requester_id, provider_id, raw_date, now
    )
    await dispatch_provider_notification(queue, appointment, requester_name)

    logger.info('Appointment %s booked with provider %s at %s', appointment.id, provider_id, appointment.date)
    return appointment


async def cancel_appointment(
    db: Session,
    queue,
    requester_id: int,
    appointment_id: int,
    now: datetime | None = None,
) -> Appointment:
    appointment = await run_in_threadpool(mark_canceled, db, requester_id, appointment_id, now)
    await dispatch_cancellation_job(queue, appointment)

    logger.info('Appointment %s canceled by user %s', appointment.id, requester_id)
    return appointment


def list_appointments(db: Session, user_id: int, page: int = 1) -> list[Appointment]:
    if page < 1:
        raise ValidationError()

    page_size = config.APPOINTMENTS_PAGE_SIZE
    return db.query(Appointment).options(
        joinedload(Appointment.provider).joinedload(User.avatar),
    ).filter(
        Appointment.user_id == user_id,
        Appointment.canceled_at.is_(None),
    ).order_by(
        Appointment.date.asc(),
        Appointment.id.asc(),
    ).limit(page_size).offset((page - 1) * page_size).all()
