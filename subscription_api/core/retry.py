"""
Bounded retry helper for local persistence steps.

Unlike upstream calls (which are never retried), a handful of local writes
are retried a fixed number of times. The attempt count is the contract;
the delay between attempts defaults to zero and can be switched to
exponential backoff with jitter through configuration.
"""
import asyncio
import random
import logging
from typing import Callable, Tuple

logger = logging.getLogger(__name__)


def backoff_delay(
    attempt: int,
    initial_delay: float,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> float:
    """Delay before the attempt following ``attempt`` (1-based)."""
    if initial_delay <= 0:
        return 0.0
    delay = min(initial_delay * (exponential_base ** (attempt - 1)), max_delay)
    if jitter:
        delay += delay * 0.1 * random.random()
    return delay


async def retry_until_true(
    func: Callable[[], bool],
    max_attempts: int = 5,
    initial_delay: float = 0.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> Tuple[bool, int]:
    """
    Call ``func`` until it returns True or ``max_attempts`` is reached.

    Attempts are strictly sequential. ``func`` must not raise; a falsy
    return value counts as a failed attempt.

    Returns:
        (succeeded, attempts_made)
    """
    attempt = 0
    while attempt < max_attempts:
        attempt += 1
        if func():
            return True, attempt

        if attempt >= max_attempts:
            logger.warning(f"Max attempts ({max_attempts}) reached, giving up")
            break

        delay = backoff_delay(attempt, initial_delay, max_delay, exponential_base, jitter)
        if delay > 0:
            logger.info(f"Attempt {attempt}/{max_attempts} failed. Retrying in {delay:.2f}s")
            await asyncio.sleep(delay)
        else:
            logger.info(f"Attempt {attempt}/{max_attempts} failed. Retrying")

    return False, attempt
