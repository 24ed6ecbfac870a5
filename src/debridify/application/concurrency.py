"""Named fan-out combinators.

``gather_settled`` waits for every awaitable and keeps only the ones that
succeeded. ``gather_fail_fast`` waits for every awaitable but raises the
first error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable, Mapping
from typing import TypeVar

import structlog

T = TypeVar("T")

log = structlog.get_logger(__name__)


async def gather_settled(
    tasks: Mapping[str, Awaitable[T]],
    *,
    timeout: float | None = None,
) -> dict[str, T]:
    """Await all *tasks* concurrently; failures are logged and dropped.

    Args:
        tasks: Label -> awaitable. The label is only used for logging and
            as the key of the result.
        timeout: Optional per-task timeout in seconds.

    Returns:
        Label -> result for every task that completed, in the iteration
        order of *tasks*.
    """

    async def _settle(label: str, aw: Awaitable[T]) -> tuple[bool, T | None]:
        try:
            if timeout is None:
                return True, await aw
            return True, await asyncio.wait_for(aw, timeout=timeout)
        except TimeoutError:
            log.warning("settled_task_timeout", task=label, timeout=timeout)
        except Exception:
            log.warning("settled_task_failed", task=label, exc_info=True)
        return False, None

    labels = list(tasks)
    outcomes = await asyncio.gather(
        *(_settle(label, aw) for label, aw in tasks.items())
    )

    settled: dict[str, T] = {}
    for label, (ok, value) in zip(labels, outcomes):
        if ok:
            settled[label] = value  # type: ignore[assignment]
    return settled


async def gather_fail_fast(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Await all *aws* concurrently; the first exception propagates."""
    return list(await asyncio.gather(*aws))
