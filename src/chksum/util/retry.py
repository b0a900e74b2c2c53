"""Retry helper for downloads."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


def retry(
    operation: Callable[[], T],
    *,
    attempts: int,
    backoff_seconds: float,
    retry_on: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Run ``operation`` up to ``attempts`` times with exponential backoff.

    Only exceptions matching ``retry_on`` are retried; anything else, and
    the last matching error, propagates to the caller.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    for attempt in range(attempts):
        try:
            return operation()
        except retry_on as exc:
            if attempt == attempts - 1:
                raise
            delay = backoff_seconds * (2**attempt)
            LOGGER.warning("Attempt %s/%s failed (%s); retrying in %.2fs", attempt + 1, attempts, exc, delay)
            time.sleep(delay)
    raise AssertionError("unreachable")


__all__ = ["retry"]
