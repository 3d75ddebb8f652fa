"""arq worker for deferred appointment jobs.

Run with ``arq backend.worker.WorkerSettings``.
"""

import logging

from arq import func

from backend.core import config
from backend.database import SessionLocal
from backend.jobs.queue import get_redis_settings
from backend.jobs.registry import build_job_registry
from backend.mail.mailer import Mailer

logger = logging.getLogger(__name__)


async def startup(ctx: dict) -> None:
    ctx['mailer'] = Mailer.from_config()
    ctx['session_factory'] = SessionLocal
    logger.info('Worker ready; cancellation mail enabled: %s', config.CANCELLATION_MAIL_ENABLED)


class WorkerSettings:
    functions = [func(handler, name=job_key) for job_key, handler in build_job_registry().items()]
    redis_settings = get_redis_settings()
    on_startup = startup
    max_tries = config.JOB_MAX_TRIES
