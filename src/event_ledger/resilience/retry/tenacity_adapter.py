"""Resilience – TenacityRetryPolicy adapter."""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

import tenacity

T = TypeVar("T")


class TenacityRetryPolicy:
    """Bounded retry around an async call, backed by ``tenacity``.

    Publishers use it to absorb short transport hiccups before reporting a
    failed attempt to the outbox dispatcher.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call).
    wait:
        A ``tenacity`` wait strategy, e.g.
        ``tenacity.wait_exponential(multiplier=0.1, max=2)``.
        Defaults to ``wait_fixed(0.5)``.
    retry:
        A ``tenacity`` retry predicate. Defaults to retrying on any exception.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        wait: Any = None,
        retry: Any = None,
        **kwargs: Any,
    ) -> None:
        self._max_attempts = max_attempts
        self._wait = wait if wait is not None else tenacity.wait_fixed(0.5)
        self._retry = retry if retry is not None else tenacity.retry_if_exception_type(Exception)
        self._extra_kwargs = kwargs

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def _build_async_retrying(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(self._max_attempts),
            wait=self._wait,
            retry=self._retry,
            reraise=True,
            **self._extra_kwargs,
        )

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Execute *func* with retry; the last exception is re-raised."""
        async for attempt in self._build_async_retrying():
            with attempt:
                result = await func()
        return result  # type: ignore[return-value]


__all__ = ["TenacityRetryPolicy"]
