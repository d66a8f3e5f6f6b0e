"""
Bounded concurrency scheduler.

Runs an async function over a list of inputs with at most ``limit`` calls in
flight, yielding each result as soon as it is ready.

Usage:
    async with aclosing(bounded_map(check, links, limit=5)) as results:
        async for result in results:
            print(result.input, result.output)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Generic, Iterable, TypeVar, Union

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


@dataclass(frozen=True)
class MapResult(Generic[InputT, OutputT]):
    """One input paired with the output produced for it."""

    input: InputT
    output: OutputT


@dataclass(frozen=True)
class _WorkerFailure:
    input: object
    error: BaseException


async def bounded_map(
    fn: Callable[[InputT], Awaitable[OutputT]],
    inputs: Iterable[InputT],
    limit: int,
) -> AsyncIterator[MapResult[InputT, OutputT]]:
    """
    Apply ``fn`` to every input with bounded concurrency.

    A fixed pool of ``min(limit, len(inputs))`` workers pulls inputs from a
    shared queue; each worker takes the next unclaimed input as soon as it
    finishes its current one. Results are yielded in completion order, so
    with ``limit == 1`` they come out in input order.

    Every input yields exactly one result. If ``fn`` raises, the remaining
    workers are cancelled and the error is re-raised here. Closing the
    generator early cancels all in-flight calls.

    Args:
        fn: Async function to apply
        inputs: Inputs to process
        limit: Maximum number of concurrent calls (>= 1)

    Yields:
        MapResult for each input

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    items = list(inputs)
    if not items:
        return

    pending: asyncio.Queue = asyncio.Queue()
    for item in items:
        pending.put_nowait(item)
    finished: asyncio.Queue = asyncio.Queue()

    async def worker() -> None:
        while True:
            try:
                item = pending.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                output = await fn(item)
            except Exception as e:
                finished.put_nowait(_WorkerFailure(item, e))
                return
            finished.put_nowait(MapResult(item, output))

    workers = [
        asyncio.create_task(worker())
        for _ in range(min(limit, len(items)))
    ]

    try:
        for _ in range(len(items)):
            result: Union[MapResult, _WorkerFailure] = await finished.get()
            if isinstance(result, _WorkerFailure):
                raise result.error
            yield result
    finally:
        in_flight = [w for w in workers if not w.done()]
        if in_flight:
            logger.debug(f"Cancelling {len(in_flight)} in-flight workers")
            for w in in_flight:
                w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
