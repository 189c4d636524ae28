# -*- coding: utf-8 -*-
"""
Failed-login counting with temporary lockout.

After LOCKOUT_MAX_ATTEMPTS consecutive failures an account is locked for
LOCKOUT_MINUTES; it unlocks by itself once that window has passed. The
counter is incremented with an F() expression so concurrent failures for
one user are all counted.
"""
from __future__ import annotations
import logging
from datetime import datetime, timedelta
from typing import Optional

from django.db.models import F
from django.utils import timezone

from tracker.conf import tracker_setting
from tracker.models import AccountLockout

log = logging.getLogger(__name__)


def _record(user) -> AccountLockout:
    obj, _ = AccountLockout.objects.get_or_create(user=user)
    return obj


def unlock_at(record: AccountLockout) -> Optional[datetime]:
    if not record.locked or record.lockout_time is None:
        return None
    return record.lockout_time + timedelta(minutes=tracker_setting("LOCKOUT_MINUTES"))


def is_locked(user) -> bool:
    """True while the lockout window is running; an expired lock is cleared."""
    record = AccountLockout.objects.filter(user=user).first()
    if record is None or not record.locked:
        return False
    until = unlock_at(record)
    if until is not None and timezone.now() >= until:
        AccountLockout.objects.filter(pk=record.pk).update(
            locked=False, failed_attempts=0, lockout_time=None
        )
        log.info("[lockout] user=%s unlocked after timeout", user.pk)
        return False
    return True


def register_failure(user) -> AccountLockout:
    record = _record(user)
    AccountLockout.objects.filter(pk=record.pk).update(failed_attempts=F("failed_attempts") + 1)
    record.refresh_from_db()

    max_attempts = tracker_setting("LOCKOUT_MAX_ATTEMPTS")
    if not record.locked and record.failed_attempts >= max_attempts:
        updated = AccountLockout.objects.filter(pk=record.pk, locked=False).update(
            locked=True, lockout_time=timezone.now()
        )
        if updated:
            log.warning(
                "[lockout] user=%s locked after %s failed attempts",
                user.pk, record.failed_attempts
            )
        record.refresh_from_db()
    return record


def register_success(user) -> None:
    AccountLockout.objects.update_or_create(
        user=user,
        defaults={
            "failed_attempts": 0,
            "locked": False,
            "lockout_time": None,
            "last_login_at": timezone.now(),
        },
    )


def clear(user) -> None:
    """Drop failures and any running lock, e.g. after a password reset."""
    updated = AccountLockout.objects.filter(user=user).update(
        failed_attempts=0, locked=False, lockout_time=None
    )
    if updated:
        log.info("[lockout] user=%s cleared", user.pk)
