import pytest
from datetime import timedelta
from django.utils import timezone

from tracker.models import AccountLockout
from tracker.services import lockout


@pytest.mark.django_db
def test_locks_after_max_attempts(member):
    for _ in range(4):
        lockout.register_failure(member)
    assert lockout.is_locked(member) is False

    record = lockout.register_failure(member)

    assert record.failed_attempts == 5
    assert record.locked is True
    assert lockout.is_locked(member) is True


@pytest.mark.django_db
def test_lock_expires_after_window(member):
    for _ in range(5):
        lockout.register_failure(member)
    AccountLockout.objects.filter(user=member).update(lockout_time=timezone.now() - timedelta(minutes=16))

    assert lockout.is_locked(member) is False
    record = AccountLockout.objects.get(user=member)
    assert (record.locked, record.failed_attempts) == (False, 0)


@pytest.mark.django_db
def test_success_resets_counter(member):
    lockout.register_failure(member)
    lockout.register_failure(member)

    lockout.register_success(member)

    record = AccountLockout.objects.get(user=member)
    assert record.failed_attempts == 0
    assert record.last_login_at is not None


@pytest.mark.django_db
def test_threshold_follows_settings(settings, member):
    settings.TRACKER = {**settings.TRACKER, "LOCKOUT_MAX_ATTEMPTS": 2}

    lockout.register_failure(member)
    lockout.register_failure(member)

    assert lockout.is_locked(member) is True
