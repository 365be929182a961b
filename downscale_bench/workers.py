"""Bounded async worker pool.

A fixed number of worker coroutines pull jobs from a shared iterator, so at
most ``workers`` jobs are in flight at any time regardless of how many jobs
are queued. This keeps the quadratic comparison fan-out from exhausting file
descriptors or oracle capacity.

Join semantics:

- Every job completes and the results come back in submission order, or
- the first failure stops workers from picking up new jobs, jobs already in
  flight run to completion, and that first failure is re-raised.

No job is still running once :func:`run_pool` returns or raises, so callers
can safely tear down shared resources (such as the cache root) afterwards.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

T = TypeVar("T")

Job = Callable[[], Awaitable[T]]


async def run_pool(jobs: Sequence[Job[T]], workers: int) -> list[T]:
    """Run *jobs* with at most *workers* of them in flight.

    Args:
        jobs: Zero-argument callables returning awaitables
        workers: Maximum concurrency (must be at least 1)

    Returns:
        Results of all jobs, in the same order as *jobs*

    Raises:
        ValueError: If *workers* is less than 1
        Exception: The first exception raised by any job
    """
    if workers < 1:
        msg = f"Worker count must be at least 1, got {workers}"
        raise ValueError(msg)

    results: list[T | None] = [None] * len(jobs)
    failures: list[BaseException] = []
    queue = iter(enumerate(jobs))

    async def worker() -> None:
        # next() never suspends, so sharing one iterator between workers is safe
        for index, job in queue:
            if failures:
                return
            try:
                results[index] = await job()
            except Exception as exc:
                failures.append(exc)
                return

    await asyncio.gather(*(worker() for _ in range(min(workers, len(jobs)))))

    if failures:
        raise failures[0]
    return results  # type: ignore[return-value]
