"""Fixed-delay retries around remote calls."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

import requests
from tenacity import (
    RetryError,
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .errors import RemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_DELAY = 1.0


def build_retrying(retry_count: int = DEFAULT_RETRY_COUNT, delay: float = DEFAULT_RETRY_DELAY) -> Retrying:
    """``retry_count`` retries after the first attempt, ``delay`` seconds apart."""
    return Retrying(
        stop=stop_after_attempt(retry_count + 1),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(requests.RequestException),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def call_with_retries(
    description: str,
    func: Callable[[], T],
    *,
    url: str | None = None,
    retry_count: int = DEFAULT_RETRY_COUNT,
    delay: float = DEFAULT_RETRY_DELAY,
) -> T:
    """Run ``func`` under the retry policy, raising :class:`RemoteError` once it is exhausted."""
    try:
        return build_retrying(retry_count, delay)(func)
    except RetryError as exc:
        last = exc.last_attempt.exception()
        logger.error("%s failed after %d retries: %s", description, retry_count, last)
        raise RemoteError(
            f"{description} failed after {retry_count} retries: {last}",
            url=url,
            retries=retry_count,
        ) from last
