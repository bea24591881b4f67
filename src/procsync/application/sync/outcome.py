"""
Outcome helpers - Turn tracker calls into Result values.

Per-unit steps wrap their tracker calls with :func:`attempt` so a failed
section, task or backfill becomes an ``Err`` the caller records as a warning.
Authentication failures are never wrapped: they make every later call fail
too, so they propagate and end the sync.

Steps that create a remote object and then record its id locally run under
:func:`deferred_interrupt`, so Ctrl-C cannot land between the two.
"""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from procsync.core.exceptions import AuthenticationError, TrackerError
from procsync.core.result import Err, Ok, Result


T = TypeVar("T")

logger = logging.getLogger("SyncOutcome")


def attempt(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T, TrackerError]:
    """Call ``fn``; return ``Ok(value)`` or ``Err(TrackerError)``."""
    try:
        return Ok(fn(*args, **kwargs))
    except AuthenticationError:
        raise
    except TrackerError as exc:
        return Err(exc)


@contextmanager
def deferred_interrupt() -> Iterator[None]:
    """
    Hold SIGINT until the block has finished, then deliver it.

    The in-flight request completes and its result is persisted before the
    interrupt surfaces. Signal handlers can only be installed from the main
    thread; elsewhere the block runs unguarded.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    received: list[tuple[int, Any]] = []

    def hold(signum: int, frame: Any) -> None:
        logger.warning("Interrupt received; finishing the current step first")
        received.append((signum, frame))

    previous = signal.signal(signal.SIGINT, hold)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)
        if received:
            if callable(previous):
                previous(*received[0])
            elif previous != signal.SIG_IGN:
                raise KeyboardInterrupt
