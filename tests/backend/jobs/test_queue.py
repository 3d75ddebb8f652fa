import asyncio
from types import SimpleNamespace

import pytest
from arq.connections import RedisSettings

from backend.jobs import queue as queue_module
from backend.jobs.queue import JobQueue, get_redis_settings


class FakePool:
    def __init__(self):
        self.enqueued = []
        self.closed = False

    async def enqueue_job(self, function, *args):
        self.enqueued.append((function, args))
        return SimpleNamespace(job_id=f'job-{len(self.enqueued)}')

    async def close(self):
        self.closed = True


def test_job_queue_opens_pool_once_and_returns_job_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    pool = FakePool()
    opened = []

    async def fake_create_pool(settings):
        opened.append(settings)
        return pool

    monkeypatch.setattr(queue_module, 'create_pool', fake_create_pool)
    job_queue = JobQueue(RedisSettings())

    async def scenario():
        first = await job_queue.enqueue('CancellationMail', {'appointment': {'id': 1}})
        second = await job_queue.enqueue('ProviderNotification', {'appointment_id': 2})
        await job_queue.close()
        return first, second

    assert asyncio.run(scenario()) == ('job-1', 'job-2')
    assert len(opened) == 1
    assert pool.enqueued[0] == ('CancellationMail', ({'appointment': {'id': 1}},))
    assert pool.closed is True


def test_get_redis_settings_prefers_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.core.config.REDIS_URL', 'redis://:secret@cache.internal:6380/2')

    settings = get_redis_settings()

    assert settings.host == 'cache.internal'
    assert settings.port == 6380
    assert settings.database == 2
    assert settings.password == 'secret'


def test_get_redis_settings_from_host_and_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('backend.core.config.REDIS_URL', '')
    monkeypatch.setattr('backend.core.config.REDIS_HOST', 'redis')
    monkeypatch.setattr('backend.core.config.REDIS_PORT', 6379)

    settings = get_redis_settings()

    assert (settings.host, settings.port) == ('redis', 6379)


def test_job_queue_opens_a_single_pool_for_concurrent_enqueues(monkeypatch: pytest.MonkeyPatch) -> None:
    pools = []

    async def slow_create_pool(settings):
        await asyncio.sleep(0.01)
        pool = FakePool()
        pools.append(pool)
        return pool

    monkeypatch.setattr(queue_module, 'create_pool', slow_create_pool)
    job_queue = JobQueue(RedisSettings())

    async def scenario():
        return await asyncio.gather(
            *(job_queue.enqueue('CancellationMail', {'appointment': {'id': index}}) for index in range(5))
        )

    job_ids = asyncio.run(scenario())

    assert len(pools) == 1
    assert len(pools[0].enqueued) == 5
    assert sorted(job_ids) == [f'job-{index}' for index in range(1, 6)]
