"""
Retry wrapper for outbound model API calls

Exponential backoff with jitter. The number of attempts is capped by
``max_retries``; elapsed time is not.
"""
import random
import time
from typing import Callable, Optional

import httpx

from neuronote.exceptions import TransientAPIError
from neuronote.utils.logger import get_logger

logger = get_logger(__name__)

RETRYABLE_STATUSES = frozenset({429, 500, 503})


def backoff_delay(attempt: int, jitter: Optional[float] = None) -> float:
    """
    Seconds to wait before retry number ``attempt`` (0-based).

    Args:
        attempt: How many retries have already happened
        jitter: Fixed jitter term, random in [0, 1) when None

    Returns:
        2 ** attempt plus jitter
    """
    if attempt < 0:
        raise ValueError("attempt must be >= 0")
    if jitter is None:
        jitter = random.random()
    return float(2 ** attempt) + jitter


def request_with_retry(
    client: httpx.Client,
    method: str,
    url: str,
    max_retries: int = 5,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs
) -> httpx.Response:
    """
    Issue a request, retrying transient failures.

    Network errors and statuses in RETRYABLE_STATUSES are retried up to
    ``max_retries`` times. The first non-retryable response is returned.
    Once retries run out the last retryable response is returned so the
    caller can report its status; a persistent network error is raised as
    TransientAPIError.
    """
    attempt = 0
    while True:
        try:
            response = client.request(method, url, **kwargs)
        except httpx.TransportError as e:
            if attempt >= max_retries:
                logger.error(f"Network error after {attempt + 1} attempts: {e}")
                raise TransientAPIError(
                    "Could not reach the model API. Please try again.",
                    detail=str(e)
                ) from e
            delay = backoff_delay(attempt)
            logger.warning(f"Network error ({type(e).__name__}), retry {attempt + 1}/{max_retries} in {delay:.1f}s")
        else:
            if response.status_code not in RETRYABLE_STATUSES:
                return response
            if attempt >= max_retries:
                logger.error(f"Giving up after {attempt + 1} attempts, last status {response.status_code}")
                return response
            delay = backoff_delay(attempt)
            logger.warning(f"HTTP {response.status_code}, retry {attempt + 1}/{max_retries} in {delay:.1f}s")

        sleep(delay)
        attempt += 1
