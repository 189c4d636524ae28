# ============================================
# tracker/selectors/comment.py
# ============================================
from typing import Optional

from django.db.models import QuerySet

from tracker.models import Comment


class CommentSelector:

    @staticmethod
    def get_comment_by_id(comment_id: int) -> Optional[Comment]:
        """Get single comment"""
        try:
            return Comment.objects.select_related('author', 'issue__project').get(id=comment_id)
        except Comment.DoesNotExist:
            return None

    @staticmethod
    def get_comments_by_issue(issue_id: int) -> QuerySet:
        """Get all comments for an issue"""
        return (
            Comment.objects
            .filter(issue_id=issue_id)
            .select_related('author')
            .order_by('created_at', 'id')
        )
