"""Scoped advisory file locks."""

from __future__ import annotations

import fcntl
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO

logger = logging.getLogger(__name__)


@contextmanager
def scoped_lock(handle: IO, exclusive: bool = False) -> Iterator[IO]:
    """Hold an advisory lock on an open file for the duration of a block.

    Shared locks are used for readers and exclusive locks for writers.
    The lock is released on every exit path; closing the handle stays the
    caller's job (normally the enclosing ``with open(...)``).

    Args:
        handle: Open file object.
        exclusive: Take an exclusive lock instead of a shared one.

    Yields:
        The same handle, locked.
    """
    operation = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
    fcntl.flock(handle.fileno(), operation)
    try:
        yield handle
    finally:
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            # Closing the handle drops the lock anyway.
            logger.debug("Failed to release lock on %s: %s", getattr(handle, "name", handle), e)
