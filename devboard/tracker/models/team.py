# ============================================
# tracker/models/team.py
# ============================================
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from tracker.conf import tracker_setting


class ProjectMember(models.Model):
    class Role(models.TextChoices):
        OWNER = 'OWNER', 'Owner'
        MEMBER = 'MEMBER', 'Member'
        VIEWER = 'VIEWER', 'Viewer'

    project = models.ForeignKey(
        'Project',
        on_delete=models.CASCADE,
        related_name='members'
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='project_memberships'
    )
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'project_members'
        ordering = ['joined_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['project', 'user'], name='uniq_project_member'),
        ]

    def __str__(self):
        return f"{self.project.key} - {self.user} ({self.role})"


def _new_token() -> str:
    return uuid.uuid4().hex


class ProjectInvitation(models.Model):
    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        ACCEPTED = 'ACCEPTED', 'Accepted'
        DECLINED = 'DECLINED', 'Declined'
        CANCELLED = 'CANCELLED', 'Cancelled'
        EXPIRED = 'EXPIRED', 'Expired'

    project = models.ForeignKey(
        'Project',
        on_delete=models.CASCADE,
        related_name='invitations'
    )
    email = models.EmailField(max_length=255)
    role = models.CharField(
        max_length=10,
        choices=ProjectMember.Role.choices,
        default=ProjectMember.Role.MEMBER
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='+'
    )
    token = models.CharField(max_length=64, unique=True, default=_new_token)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'project_invitations'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['project', 'status']),
        ]

    def __str__(self):
        return f"{self.project.key} -> {self.email} ({self.status})"

    def save(self, *args, **kwargs):
        if self.expires_at is None:
            self.expires_at = timezone.now() + timedelta(days=tracker_setting('INVITATION_TTL_DAYS'))
        super().save(*args, **kwargs)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and timezone.now() > self.expires_at

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING and not self.is_expired

    def _respond(self, status: str) -> None:
        self.status = status
        self.responded_at = timezone.now()

    def accept(self) -> None:
        self._respond(self.Status.ACCEPTED)

    def decline(self) -> None:
        self._respond(self.Status.DECLINED)

    def cancel(self) -> None:
        self._respond(self.Status.CANCELLED)
