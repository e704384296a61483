"""Fire-and-forget execution of delivery work off the request path."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

logger = logging.getLogger(__name__)


class BackgroundDispatcher:
    """Run callables on a bounded thread pool, logging instead of raising failures."""

    def __init__(self, max_workers: int = 4, *, thread_name_prefix: str = "delivery") -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=thread_name_prefix
        )
        self._closed = False

    def submit(self, description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future | None:
        """Schedule ``func``; the returned future is only useful to tests."""

        if self._closed:
            logger.warning("Dispatcher closed; dropping background task %s", description)
            return None
        future = self._executor.submit(func, *args, **kwargs)
        future.add_done_callback(lambda done: self._log_failure(description, done))
        return future

    def shutdown(self, *, wait: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(description: str, future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed: %s",
                description,
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )


__all__ = ["BackgroundDispatcher"]
