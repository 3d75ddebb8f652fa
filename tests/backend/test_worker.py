import asyncio

from backend.database import SessionLocal
from backend.mail.mailer import Mailer
from backend.worker import WorkerSettings, startup


def test_worker_registers_handlers_under_job_keys() -> None:
    names = {function.name for function in WorkerSettings.functions}

    assert names == {'CancellationMail', 'ProviderNotification'}


def test_worker_startup_builds_context() -> None:
    ctx: dict = {}

    asyncio.run(startup(ctx))

    assert isinstance(ctx['mailer'], Mailer)
    assert ctx['session_factory'] is SessionLocal
