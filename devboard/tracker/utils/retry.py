# -*- coding: utf-8 -*-
from __future__ import annotations
import functools
import logging
import time
from typing import Callable, Tuple, Type

from django.db import OperationalError, transaction

from tracker.conf import tracker_setting
from tracker.exceptions import Conflict

logger = logging.getLogger(__name__)


def backoff(attempt: int) -> None:
    """Short linear pause before the next attempt."""
    delay = tracker_setting("RETRY_BACKOFF_SECONDS") * attempt
    if delay > 0:
        time.sleep(delay)


def retry_on_conflict(
    setting_name: str = "POSITION_MAX_RETRIES",
    exceptions: Tuple[Type[BaseException], ...] = (OperationalError,),
) -> Callable:
    """
    Run the wrapped function in its own transaction and re-run it when the
    database reports a lock conflict (deadlock, lock timeout, SQLite
    "database is locked"). The number of attempts is read from
    TRACKER[setting_name]; after the last one the caller gets a 409 Conflict.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempts = tracker_setting(setting_name)
            last_error = None
            for attempt in range(1, attempts + 1):
                try:
                    with transaction.atomic():
                        return func(*args, **kwargs)
                except exceptions as ex:
                    last_error = ex
                    logger.warning(
                        "[retry] %s failed (attempt %s/%s): %s",
                        func.__name__, attempt, attempts, ex
                    )
                    if attempt < attempts:
                        backoff(attempt)
            raise Conflict(
                f"Could not complete {func.__name__.replace('_', ' ')} "
                f"after {attempts} attempts, please retry"
            ) from last_error
        return wrapper
    return decorator
