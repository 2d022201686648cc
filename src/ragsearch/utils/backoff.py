"""Retry delay policy for remote calls."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential backoff settings.

    Attributes:
        max_attempts: Maximum number of attempts (including first try)
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound for any computed delay, in seconds
    """

    max_attempts: int = 6
    base_delay: float = 0.2
    max_delay: float = 5.0


def backoff_delay(
    attempt: int,
    policy: BackoffPolicy,
    retry_after: float | None = None,
) -> float:
    """Calculate the delay before retrying a failed attempt.

    A server-supplied Retry-After value is used as-is in preference to the
    computed backoff. Otherwise the base delay doubles per attempt and is
    capped at `policy.max_delay`.

    Args:
        attempt: Attempt number that just failed (0-based)
        policy: Backoff settings
        retry_after: Server hint in seconds, if any

    Returns:
        Delay in seconds
    """
    if retry_after is not None:
        return retry_after

    attempt = max(attempt, 0)
    return min(policy.base_delay * (2 ** attempt), policy.max_delay)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds.

    HTTP-date values, negative or non-finite numbers and garbage are
    ignored (None).
    """
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds
