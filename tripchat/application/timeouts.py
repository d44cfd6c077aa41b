"""Bounded calls into the generation backend."""

from __future__ import annotations

import concurrent.futures
from typing import Any, Callable, TypeVar

from tripchat.shared.exceptions import GenerationError

T = TypeVar("T")


def _call(fn: Callable[..., T], *args: Any) -> T:
    try:
        return fn(*args)
    except GenerationError:
        raise
    except Exception as exc:
        raise GenerationError(f"generation backend failed: {exc}") from exc


def call_generation(fn: Callable[..., T], *args: Any, timeout: int) -> T:
    """Run a generation call, surfacing every failure as GenerationError.

    With a positive ``timeout`` the call runs in a worker thread and is
    abandoned after that many seconds; the worker is not interrupted and its
    late result is discarded.
    """
    if timeout <= 0:
        return _call(fn, *args)
    pool = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    future = pool.submit(_call, fn, *args)
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        raise GenerationError(f"generation timed out after {timeout}s") from None
    finally:
        pool.shutdown(wait=False)


__all__ = ["call_generation"]
