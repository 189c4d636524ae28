# ============================================
# tracker/models/account.py
# ============================================
from django.conf import settings
from django.db import models


class AccountLockout(models.Model):
    """Failed-login bookkeeping kept beside auth.User."""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='lockout'
    )
    failed_attempts = models.PositiveIntegerField(default=0)
    locked = models.BooleanField(default=False)
    lockout_time = models.DateTimeField(null=True, blank=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'account_lockouts'

    def __str__(self):
        return f"{self.user} attempts={self.failed_attempts} locked={self.locked}"


class EmailVerification(models.Model):
    """Address confirmation for self-registered accounts."""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='email_verification'
    )
    email = models.EmailField()
    created_at = models.DateTimeField(auto_now_add=True)
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'email_verifications'

    def __str__(self):
        return f"{self.email} verified={self.is_verified}"

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None
