# ============================================
# tracker/models/notification.py
# ============================================
from django.conf import settings
from django.db import models


class Notification(models.Model):
    class Type(models.TextChoices):
        MENTION = 'MENTION', 'Mention'
        ASSIGNMENT = 'ASSIGNMENT', 'Assignment'
        STATUS_CHANGE = 'STATUS_CHANGE', 'Status change'
        COMMENT_ADDED = 'COMMENT_ADDED', 'Comment added'
        ISSUE_UPDATED = 'ISSUE_UPDATED', 'Issue updated'
        INVITATION = 'INVITATION', 'Invitation'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(max_length=20, choices=Type.choices)
    message = models.CharField(max_length=500)
    link = models.CharField(max_length=500, blank=True, default='')
    related_entity_id = models.BigIntegerField(null=True, blank=True)
    related_entity_type = models.CharField(max_length=50, blank=True, default='')
    is_read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'is_read']),
        ]

    def __str__(self):
        state = "read" if self.is_read else "unread"
        return f"NOTI[{self.type}] to={self.user_id} ({state})"
