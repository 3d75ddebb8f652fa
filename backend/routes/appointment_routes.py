from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.database import SessionLocal
from backend.jobs.queue import JobQueue
from backend.models.user import User
from backend.services import appointments

router = APIRouter(tags=['appointments'])


class CreateAppointmentRequest(BaseModel):
    provider_id: int = Field(strict=True)
    date: datetime

    @field_validator('provider_id')
    @classmethod
    def validate_provider_id(cls, value: int) -> int:
        if value < 1:
            raise ValueError('Provider id must be positive.')
        return value


class AvatarResponse(BaseModel):
    path: str
    url: str

    class Config:
        from_attributes = True


class ProviderSummaryResponse(BaseModel):
    id: int
    name: str
    avatar: AvatarResponse | None = None

    class Config:
        from_attributes = True


class AppointmentListItemResponse(BaseModel):
    id: int
    date: datetime
    past: bool
    cancelable: bool
    provider: ProviderSummaryResponse

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: int
    user_id: int
    provider_id: int
    date: datetime
    canceled_at: datetime | None = None

    class Config:
        from_attributes = True


class ProviderContactResponse(BaseModel):
    name: str
    email: str

    class Config:
        from_attributes = True


class UserNameResponse(BaseModel):
    name: str

    class Config:
        from_attributes = True


class CanceledAppointmentResponse(AppointmentResponse):
    past: bool
    cancelable: bool
    provider: ProviderContactResponse
    user: UserNameResponse


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_job_queue(request: Request) -> JobQueue:
    return request.app.state.job_queue


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail='Database unavailable. Verify DATABASE_URL and database credentials.',
    )


@router.get('', response_model=list[AppointmentListItemResponse])
def list_my_appointments(
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return appointments.list_appointments(db, current_user.id, page)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('', response_model=AppointmentResponse)
async def create_appointment(
    data: CreateAppointmentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    queue: JobQueue = Depends(get_job_queue),
):
    try:
        return await appointments.create_appointment(
            db,
            queue,
            requester_id=current_user.id,
            provider_id=data.provider_id,
            raw_date=data.date,
        )
    except SQLAlchemyError as exc:
        await run_in_threadpool(db.rollback)
        raise database_unavailable() from exc


@router.delete('/{appointment_id}', response_model=CanceledAppointmentResponse)
async def cancel_my_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    queue: JobQueue = Depends(get_job_queue),
):
    try:
        return await appointments.cancel_appointment(
            db,
            queue,
            requester_id=current_user.id,
            appointment_id=appointment_id,
        )
    except SQLAlchemyError as exc:
        await run_in_threadpool(db.rollback)
        raise database_unavailable() from exc
