"""Run request-scoped work that stops when the client goes away."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import Request

from src.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ClientDisconnected(Exception):
    """The HTTP client disconnected before the work finished."""


async def _wait_for_disconnect(
    request: Request, stop: asyncio.Event, poll_interval: float
) -> bool:
    """Poll until the client disconnects (True) or ``stop`` is set (False).

    Never cancel this task: ``Request.is_disconnected`` runs inside an
    already-cancelled anyio scope that absorbs task cancellation.
    """
    while not stop.is_set():
        if await request.is_disconnected():
            return True
        try:
            await asyncio.wait_for(stop.wait(), timeout=poll_interval)
        except asyncio.TimeoutError:
            continue
    return False


async def run_until_disconnected(
    request: Request,
    work: Awaitable[T],
    timeout: float,
    poll_interval: float = 0.5,
) -> T:
    """Await ``work`` unless the client disconnects or ``timeout`` elapses.

    Raises ClientDisconnected on disconnect and asyncio.TimeoutError on
    deadline. In both cases the work is cancelled before returning.
    """
    stop = asyncio.Event()
    work_task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request, stop, poll_interval))

    try:
        done, _ = await asyncio.wait(
            {work_task, watcher},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        stop.set()
        work_task.cancel()
        raise

    stop.set()

    if work_task in done:
        await watcher
        return work_task.result()

    work_task.cancel()
    await asyncio.gather(work_task, return_exceptions=True)

    if watcher in done and watcher.result():
        logger.info("Client disconnected, forecast cancelled", path=request.url.path)
        raise ClientDisconnected()

    await watcher
    raise asyncio.TimeoutError(f"Work did not finish within {timeout} seconds")
