# tests/test_change_stream.py

from __future__ import annotations

import asyncio

import pytest

from journey.tasks.change_stream import ChangeStream
from journey.tasks.task_models import Task

from .fakes import SnapshotRecorder


def _snap(*titles: str) -> tuple[Task, ...]:
    return tuple(Task(id=i, title=t, position=i) for i, t in enumerate(titles, start=1))


@pytest.mark.asyncio
async def test_new_subscriber_gets_current_snapshot_immediately() -> None:
    stream = ChangeStream()
    s1 = _snap("a")
    stream.publish(s1)

    sub = stream.subscribe()
    assert sub.latest() == s1
    assert await asyncio.wait_for(sub.next(), timeout=1.0) == s1


@pytest.mark.asyncio
async def test_bursts_coalesce_to_latest_snapshot() -> None:
    stream = ChangeStream()
    sub = stream.subscribe()

    stream.publish(_snap("a"))
    stream.publish(_snap("a", "b"))
    stream.publish(_snap("a", "b", "c"))

    got = await asyncio.wait_for(sub.next(), timeout=1.0)
    assert [t.title for t in got] == ["a", "b", "c"]
    assert not sub.pending()


@pytest.mark.asyncio
async def test_every_subscriber_sees_snapshots_in_publish_order() -> None:
    stream = ChangeStream()
    subs = [stream.subscribe(name=f"s{i}") for i in range(3)]
    seen: dict[str, list[int]] = {s.name: [] for s in subs}

    async def consume(sub) -> None:
        async for snap in sub:
            seen[sub.name].append(len(snap))

    tasks = [asyncio.create_task(consume(s)) for s in subs]
    for n in range(1, 6):
        stream.publish(_snap(*[str(i) for i in range(n)]))
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    await asyncio.sleep(0.01)
    stream.close()
    await asyncio.wait_for(asyncio.gather(*tasks), timeout=1.0)

    for values in seen.values():
        assert values == sorted(values)
        assert values[-1] == 5


@pytest.mark.asyncio
async def test_close_ends_iteration_and_unsubscribes() -> None:
    stream = ChangeStream()
    sub = stream.subscribe()
    assert stream.subscriber_count == 1

    async def drain() -> list[tuple[Task, ...]]:
        return [s async for s in sub]

    runner = asyncio.create_task(drain())
    await asyncio.sleep(0)
    sub.close()

    assert await asyncio.wait_for(runner, timeout=1.0) == []
    assert sub.closed
    assert stream.subscriber_count == 0


def test_failing_listener_does_not_block_others() -> None:
    stream = ChangeStream()
    recorder = SnapshotRecorder()

    def broken(_snapshot) -> None:
        raise RuntimeError("boom")

    stream.add_listener(broken)
    stream.add_listener(recorder)
    stream.publish(_snap("a"))

    assert len(recorder.snapshots) == 1
    assert stream.version == 1
