from __future__ import annotations

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_call(
        func: Callable[[], T],
        *,
        max_retries: int,
        backoff_initial_seconds: float,
        backoff_multiplier: float,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call func with retries and exponential backoff.

    max_retries is the number of retries after the initial attempt. Exceptions
    outside retry_on propagate immediately; the last retryable exception is
    re-raised once retries are exhausted.
    """
    attempt = 0
    delay = backoff_initial_seconds
    while True:
        try:
            return func()
        except retry_on as e:
            if attempt >= max_retries:
                raise
            logger.debug(
                f"Attempt {attempt + 1} failed, retrying in {delay:.2f}s: {e}",
                extra={"attempt": attempt + 1},
            )
            sleep(delay)
            delay *= backoff_multiplier
            attempt += 1
