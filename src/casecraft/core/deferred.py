"""Blocking resolution of deferred case results."""

import asyncio
import inspect
from concurrent.futures import Future
from typing import Any


def is_deferred(value: Any) -> bool:
    """Check whether a case's return value stands for unfinished work."""
    return inspect.isawaitable(value) or isinstance(value, Future)


def resolve(value: Any) -> Any:
    """Block until a deferred value completes and return its result.

    Coroutines and other awaitables are driven on a fresh event loop;
    ``concurrent.futures.Future`` objects are waited on directly. A fault in
    the deferred work is raised here, exactly as if the case had raised it
    synchronously. Plain values pass through unchanged.

    The fresh loop cannot wait on an awaitable bound to another loop, such as
    an ``asyncio.Future`` from ``loop.create_future()``; asyncio raises
    ``RuntimeError`` and the case fails with it.
    """
    if inspect.iscoroutine(value):
        return asyncio.run(value)
    if inspect.isawaitable(value):
        return asyncio.run(_await(value))
    if isinstance(value, Future):
        return value.result()
    return value


async def _await(awaitable: Any) -> Any:
    return await awaitable
