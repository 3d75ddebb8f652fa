import asyncio
import logging

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings

from backend.core import config

logger = logging.getLogger(__name__)


def get_redis_settings() -> RedisSettings:
    if config.REDIS_URL:
        return RedisSettings.from_dsn(config.REDIS_URL)

    return RedisSettings(
        host=config.REDIS_HOST,
        port=config.REDIS_PORT,
        password=config.REDIS_PASSWORD,
        conn_timeout=15,
        conn_retry_delay=1,
    )


class JobQueue:
    """Submits deferred jobs to the arq worker by handler key.

    The Redis pool is opened on first use so the API can start while Redis
    is still coming up. Callers never wait for the job to run.
    """

    def __init__(self, redis_settings: RedisSettings | None = None) -> None:
        self._redis_settings = redis_settings or get_redis_settings()
        self._pool: ArqRedis | None = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self) -> ArqRedis:
        if self._pool is None:
            async with self._pool_lock:
                if self._pool is None:
                    self._pool = await create_pool(self._redis_settings)
        return self._pool

    async def enqueue(self, job_key: str, payload: dict) -> str | None:
        pool = await self._get_pool()
        job = await pool.enqueue_job(job_key, payload)
        job_id = job.job_id if job is not None else None
        logger.info('Queued %s job %s', job_key, job_id)
        return job_id

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
