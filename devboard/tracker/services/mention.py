# ============================================
# tracker/services/mention.py
# ============================================
import logging
import re
from typing import Iterable, List

from django.contrib.auth import get_user_model

from tracker.models import Comment, Mention
from tracker.services import access
from tracker.services import notification as notifications

logger = logging.getLogger(__name__)

User = get_user_model()

MENTION_PATTERN = re.compile(r'@([a-zA-Z0-9_]{3,50})')


def extract_usernames(content: str) -> List[str]:
    """@usernames in order of first appearance, without duplicates"""
    return list(dict.fromkeys(MENTION_PATTERN.findall(content or '')))


def process_mentions(comment: Comment, *, skip_user_ids: Iterable[int] = ()) -> List[Mention]:
    """
    Create a Mention (and a MENTION notification) for every project
    member named in the comment. Self-mentions and unknown names are
    ignored; users in ``skip_user_ids`` get the record but no notification.
    """
    usernames = [
        name for name in extract_usernames(comment.content)
        if name != comment.author.username
    ]
    if not usernames:
        return []

    project = comment.issue.project
    skip = set(skip_user_ids)
    mentions = []
    for user in User.objects.filter(username__in=usernames):
        if not access.has_access(project, user):
            logger.debug("[mention] @%s has no access to %s; skip", user.username, project.key)
            continue
        mentions.append(Mention.objects.create(
            comment=comment,
            mentioned_user=user,
            mentioned_by=comment.author,
        ))
        if user.pk not in skip:
            notifications.notify_mention(comment, user)
        logger.info(
            "[mention] @%s mentioned by %s in comment #%s",
            user.username, comment.author.username, comment.id
        )
    return mentions


def update_mentions(comment: Comment) -> List[Mention]:
    """Re-parse an edited comment. Users already mentioned are not notified again."""
    previous = set(comment.mentions.values_list('mentioned_user_id', flat=True))
    comment.mentions.all().delete()
    return process_mentions(comment, skip_user_ids=previous)
