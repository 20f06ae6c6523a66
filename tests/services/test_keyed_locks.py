"""Keyed Locks — exclusion per key and cleanup of idle entries."""

import asyncio

import pytest

from cardczar.infrastructure.keyed_locks import KeyedLocks


async def test_same_key_is_exclusive():
    locks = KeyedLocks()
    inside = []

    async def worker(n):
        async with locks.hold("g"):
            inside.append(n)
            assert len(inside) == 1
            await asyncio.sleep(0)
            inside.remove(n)

    await asyncio.gather(*(worker(n) for n in range(4)))
    assert len(locks) == 0


async def test_entry_kept_while_a_waiter_remains():
    locks = KeyedLocks()
    release = asyncio.Event()

    async def holder():
        async with locks.hold("g"):
            await release.wait()

    first = asyncio.create_task(holder())
    second = asyncio.create_task(holder())
    await asyncio.sleep(0)
    assert len(locks) == 1

    release.set()
    await asyncio.gather(first, second)
    assert len(locks) == 0


async def test_entry_removed_when_holder_raises():
    locks = KeyedLocks()
    with pytest.raises(RuntimeError):
        async with locks.hold("g"):
            raise RuntimeError("boom")
    assert len(locks) == 0
