"""Polling helpers that replace fixed sleeps with bounded readiness checks."""

import time
from typing import Callable

from lempstack.errors import ReadinessTimeoutError
from lempstack.errors_catalog import actionable_error
from lempstack.models import ReadinessPolicy


def backoff_delays(policy: ReadinessPolicy):
    """Yield the sleep before each retry: initial, initial*factor, ... capped at max_delay."""
    delay = policy.initial_delay
    for _ in range(max(0, policy.max_attempts - 1)):
        yield min(delay, policy.max_delay)
        delay *= policy.factor


def wait_until(
    check: Callable[[], bool],
    description: str,
    policy: ReadinessPolicy,
    logger,
    sleep: Callable[[float], None] = time.sleep,
):
    delays = backoff_delays(policy)
    attempts = max(1, policy.max_attempts)

    for attempt in range(1, attempts + 1):
        try:
            if check():
                logger.debug("%s ready after %s attempt(s)", description, attempt)
                return attempt
        except Exception as exc:
            logger.debug("Readiness check for %s raised: %s", description, exc)

        if attempt == attempts:
            break

        delay = next(delays)
        logger.debug(
            "%s not ready (attempt %s/%s). Next check in %.1fs",
            description,
            attempt,
            attempts,
            delay,
        )
        sleep(delay)

    raise ReadinessTimeoutError(
        actionable_error("readiness_timeout", description=description, attempts=str(attempts))
    )
