from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class TaskDispatcher(Protocol):
    """Runs side effects outside the request that triggered them."""

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        raise NotImplementedError


class ThreadPoolDispatcher(TaskDispatcher):
    """Fire-and-forget on a small thread pool; callers never see the outcome."""

    def __init__(self, *, max_workers: int = 4, name: str = "cardhub-bg"):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        future = self._executor.submit(fn, *args, **kwargs)
        future.add_done_callback(self._report)

    @staticmethod
    def _report(future) -> None:
        error = future.exception()
        if error is not None:
            logger.error("Background task crashed: %s", error)

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
