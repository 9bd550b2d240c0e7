import logging
import time
from typing import Callable, TypeVar

from road_network_fetcher.exceptions import RetryAttemptsExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")


def linear_backoff(delay_seconds: float) -> Callable[[int], float]:
    """
    Delay growing with the number of failed attempts: 1x, 2x, 3x...
    """

    return lambda attempt: delay_seconds * attempt


class RetryPolicy:
    """
    Calls an operation until it succeeds, at most `max_attempts` times,
    sleeping `backoff(attempt)` seconds after each failed attempt.
    Only exceptions listed in `retry_on` are retried, other exceptions
    propagate immediately.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        backoff: Callable[[int], float] = linear_backoff(1.0),
        *,
        retry_on: tuple[type[Exception], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

        self.max_attempts = max_attempts
        self._backoff = backoff
        self._retry_on = retry_on
        self._sleep = sleep

    def call(self, operation: Callable[[], T], *, description: str = "Operation") -> T:
        attempt = 1
        while True:
            try:
                return operation()
            except self._retry_on as exc:
                logger.warning(
                    "%s failed (attempt %d/%d): %s",
                    description,
                    attempt,
                    self.max_attempts,
                    exc,
                )
                if attempt >= self.max_attempts:
                    raise RetryAttemptsExhausted(description, self.max_attempts, exc)

            self._sleep(self._backoff(attempt))
            attempt += 1
