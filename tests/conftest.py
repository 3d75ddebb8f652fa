import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from backend.database import Base  # noqa: E402
from backend.models.appointment import Appointment  # noqa: E402
from backend.models.file import File  # noqa: E402
from backend.models.notification import Notification  # noqa: E402
from backend.models.user import User  # noqa: E402

TABLES = [File.__table__, User.__table__, Appointment.__table__, Notification.__table__]


class RecordingQueue:
    def __init__(self):
        self.jobs: list[tuple[str, dict]] = []

    async def enqueue(self, job_key: str, payload: dict) -> str:
        self.jobs.append((job_key, payload))
        return f'job-{len(self.jobs)}'

    def keys(self) -> list[str]:
        return [job_key for job_key, _ in self.jobs]


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=TABLES)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def appointment_db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def queue() -> RecordingQueue:
    return RecordingQueue()


@pytest.fixture
def make_user(appointment_db):
    def _make_user(name: str, email: str, provider: bool = False, avatar: File | None = None) -> User:
        user = User(name=name, email=email, provider=provider, avatar=avatar)
        appointment_db.add(user)
        appointment_db.commit()
        appointment_db.refresh(user)
        return user

    return _make_user
