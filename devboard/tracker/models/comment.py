# ============================================
# tracker/models/comment.py
# ============================================
from django.conf import settings
from django.db import models


class Comment(models.Model):
    issue = models.ForeignKey(
        'Issue',
        on_delete=models.CASCADE,
        related_name='comments'
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='comments'
    )
    content = models.TextField()
    is_edited = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'comments'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['issue', 'created_at']),
        ]

    def __str__(self):
        return f"Comment on {self.issue.key}"


class Mention(models.Model):
    comment = models.ForeignKey(
        'Comment',
        on_delete=models.CASCADE,
        related_name='mentions'
    )
    mentioned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='mentions'
    )
    mentioned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'mentions'
        indexes = [
            models.Index(fields=['mentioned_user']),
        ]

    def __str__(self):
        return f"@{self.mentioned_user} in comment #{self.comment_id}"
