# ============================================
# tracker/models/history.py
# ============================================
from django.conf import settings
from django.db import models


class IssueHistory(models.Model):
    issue = models.ForeignKey(
        'Issue',
        on_delete=models.CASCADE,
        related_name='history'
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='+'
    )
    field_name = models.CharField(max_length=50)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'issue_history'
        ordering = ['-changed_at', '-id']
        indexes = [
            models.Index(fields=['issue', '-changed_at']),
        ]

    def __str__(self):
        return f"{self.issue.key} - {self.field_name} changed"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Issue history entries are append-only")
        super().save(*args, **kwargs)
