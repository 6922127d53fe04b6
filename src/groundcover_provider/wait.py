"""Polling helper for eventually-consistent reads."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

from .errors import WaitTimeoutError

T = TypeVar("T")


def _validate_wait_args(*, timeout_seconds: float, interval_seconds: float) -> None:
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be > 0")
    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be > 0")


def poll_until(
    poll: Callable[[], T],
    *,
    predicate: Callable[[T], bool] | None = None,
    timeout_seconds: float = 10.0,
    interval_seconds: float = 1.0,
    description: str | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``poll`` until ``predicate`` accepts its result.

    At most ``timeout_seconds / interval_seconds`` polls are made, and polling
    also stops once the wall-clock timeout has elapsed.
    """
    _validate_wait_args(timeout_seconds=timeout_seconds, interval_seconds=interval_seconds)

    start = time.monotonic()
    attempts = 0
    check = predicate or (lambda value: bool(value))

    while True:
        attempts += 1
        value = poll()
        if check(value):
            return value

        elapsed = time.monotonic() - start
        if elapsed >= timeout_seconds or attempts * interval_seconds >= timeout_seconds:
            subject = description or "wait condition"
            raise WaitTimeoutError(
                f"{subject} did not match within {timeout_seconds:.2f}s after {attempts} attempts"
            )
        sleep(interval_seconds)
