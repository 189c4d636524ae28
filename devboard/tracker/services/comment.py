# ============================================
# tracker/services/comment.py
# ============================================
import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction

from tracker.models import Comment, Issue, ProjectMember
from tracker.selectors.comment import CommentSelector
from tracker.services import access, mention
from tracker.services import notification as notifications

logger = logging.getLogger(__name__)


class CommentService:

    @staticmethod
    def _check_content(content: str) -> str:
        content = (content or '').strip()
        if not content:
            raise ValidationError("Comment content cannot be empty")
        return content

    @staticmethod
    @transaction.atomic
    def create_comment(*, issue: Issue, author, content: str) -> Comment:
        """Comment on an issue; mentions and watchers are notified"""
        access.check_can_edit(issue.project, author)

        comment = Comment.objects.create(
            issue=issue,
            author=author,
            content=CommentService._check_content(content),
        )
        mentions = mention.process_mentions(comment)
        notifications.notify_comment_added(
            comment, skip_user_ids=[m.mentioned_user_id for m in mentions]
        )
        logger.info("[comment] #%s added on %s by user=%s", comment.id, issue.key, author.id)
        return comment

    @staticmethod
    def get_comments(*, issue: Issue, user):
        access.check_access(issue.project, user)
        return CommentSelector.get_comments_by_issue(issue.id)

    @staticmethod
    @transaction.atomic
    def update_comment(*, comment: Comment, user, content: str) -> Comment:
        """Update a comment"""

        # Only author can update
        if comment.author_id != user.pk:
            raise PermissionDenied("You can only edit your own comments")

        comment.content = CommentService._check_content(content)
        comment.is_edited = True
        comment.save(update_fields=['content', 'is_edited', 'updated_at'])
        mention.update_mentions(comment)
        return comment

    @staticmethod
    def delete_comment(*, comment: Comment, user) -> None:
        """Delete a comment"""

        # Author or project owner can delete
        project = comment.issue.project
        if comment.author_id != user.pk and access.get_role(project, user) != ProjectMember.Role.OWNER:
            raise PermissionDenied("You can only delete your own comments or you must be project owner")

        logger.info("[comment] #%s deleted by user=%s", comment.id, user.id)
        comment.delete()
