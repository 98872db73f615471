import asyncio

import pytest

from apithrottle.core.lock import AsyncLock


def test_acquire_returns_release_callable():
    async def scenario():
        lock = AsyncLock()
        release = await lock.acquire()
        held = lock.locked
        release()
        return held, lock.locked

    held, after = asyncio.run(scenario())

    assert held is True
    assert after is False


def test_waiters_are_granted_in_request_order():
    async def scenario():
        lock = AsyncLock()
        order: list[int] = []

        async def worker(index: int) -> None:
            async with lock:
                order.append(index)
                await asyncio.sleep(0)

        release = await lock.acquire()
        tasks = [asyncio.create_task(worker(i)) for i in range(4)]
        await asyncio.sleep(0)
        assert order == []
        release()
        await asyncio.gather(*tasks)
        return order

    assert asyncio.run(scenario()) == [0, 1, 2, 3]


def test_context_manager_releases_on_error():
    async def scenario():
        lock = AsyncLock()
        with pytest.raises(RuntimeError):
            async with lock:
                raise RuntimeError("inside")
        return lock.locked

    assert asyncio.run(scenario()) is False
