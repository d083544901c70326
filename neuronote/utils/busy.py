"""
Per-user busy flag

Only one generation or speech request may be in flight per user. There is
no cancellation: a second request is refused until the first finishes.
"""
from contextlib import contextmanager
from typing import Iterator, Set

from neuronote.utils.logger import get_logger

logger = get_logger(__name__)


class BusyError(Exception):
    """A request for this user is already running"""


class BusyGuard:
    """Set of keys with a request in flight (used from the event loop thread only)"""

    def __init__(self):
        self._active: Set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._active

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        if key in self._active:
            logger.warning(f"Rejected concurrent request for {key}")
            raise BusyError(f"A request is already in progress for {key}")
        self._active.add(key)
        try:
            yield
        finally:
            self._active.discard(key)


busy_guard = BusyGuard()
