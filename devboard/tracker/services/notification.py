# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
from typing import Optional

from django.core.exceptions import PermissionDenied

from tracker.exceptions import NotFound
from tracker.models import Comment, Issue, Notification, ProjectInvitation
from tracker.repositories import notification_repository as repo
from tracker.selectors.notification import get_notification_by_id
from tracker.utils.notify import frontend_url, send_email

log = logging.getLogger(__name__)

Type = Notification.Type


def notify(
    *,
    user,
    type: str,
    message: str,
    link: str = "",
    related_entity_id: Optional[int] = None,
    related_entity_type: str = "",
    email_subject: Optional[str] = None,
) -> Notification:
    """
    Always stores an in-app notification. When email is enabled and the
    recipient has an address, the same message is mailed as well.
    """
    obj = repo.create_notification(
        user=user,
        type=type,
        message=message,
        link=link,
        related_entity_id=related_entity_id,
        related_entity_type=related_entity_type,
    )
    log.info("[notification] %s -> user=%s (#%s)", type, user.pk, obj.id)

    if email_subject and getattr(user, "email", ""):
        text = message
        if link:
            text = f"{message}\n\n{frontend_url(link)}"
        send_email(subject=email_subject, text_body=text, to_emails=[user.email])
    return obj


def _issue_link(issue: Issue) -> str:
    return f"/issues/{issue.key}"


# ----- domain events -----

def notify_assignment(issue: Issue, assignee, assigned_by) -> Optional[Notification]:
    if assignee is None or assignee.pk == assigned_by.pk:
        return None
    return notify(
        user=assignee,
        type=Type.ASSIGNMENT,
        message=f"{assigned_by.username} assigned you to {issue.key}: {issue.title}",
        link=_issue_link(issue),
        related_entity_id=issue.id,
        related_entity_type="ISSUE",
        email_subject=f"You were assigned to {issue.key}",
    )


def notify_status_change(issue: Issue, old_state: str, new_state: str, changed_by) -> None:
    recipients = {u.pk: u for u in (issue.reporter, issue.assignee) if u is not None}
    recipients.pop(changed_by.pk, None)
    for user in recipients.values():
        notify(
            user=user,
            type=Type.STATUS_CHANGE,
            message=f"{changed_by.username} moved {issue.key} from {old_state} to {new_state}",
            link=_issue_link(issue),
            related_entity_id=issue.id,
            related_entity_type="ISSUE",
        )


def notify_issue_updated(issue: Issue, fields, changed_by) -> None:
    if not fields:
        return
    recipients = {u.pk: u for u in (issue.reporter, issue.assignee) if u is not None}
    recipients.pop(changed_by.pk, None)
    for user in recipients.values():
        notify(
            user=user,
            type=Type.ISSUE_UPDATED,
            message=f"{changed_by.username} updated {', '.join(fields)} on {issue.key}",
            link=_issue_link(issue),
            related_entity_id=issue.id,
            related_entity_type="ISSUE",
        )


def notify_comment_added(comment: Comment, skip_user_ids=()) -> None:
    issue = comment.issue
    skip = {comment.author_id, *skip_user_ids}
    recipients = {u.pk: u for u in (issue.reporter, issue.assignee) if u is not None}
    for user in recipients.values():
        if user.pk in skip:
            continue
        notify(
            user=user,
            type=Type.COMMENT_ADDED,
            message=f"{comment.author.username} commented on {issue.key}",
            link=_issue_link(issue),
            related_entity_id=comment.id,
            related_entity_type="COMMENT",
        )


def notify_mention(comment: Comment, mentioned_user) -> Notification:
    issue = comment.issue
    return notify(
        user=mentioned_user,
        type=Type.MENTION,
        message=f"{comment.author.username} mentioned you on {issue.key}",
        link=_issue_link(issue),
        related_entity_id=comment.id,
        related_entity_type="COMMENT",
        email_subject=f"You were mentioned on {issue.key}",
    )


def notify_invitation(invitation: ProjectInvitation, user=None) -> Optional[Notification]:
    """In-app notice for registered users; an email for everyone."""
    project = invitation.project
    message = (
        f"{invitation.invited_by.username} invited you to join "
        f"{project.name} ({project.key}) as {invitation.get_role_display()}"
    )
    link = f"/invitations/{invitation.token}"
    if user is not None:
        return notify(
            user=user,
            type=Type.INVITATION,
            message=message,
            link=link,
            related_entity_id=invitation.id,
            related_entity_type="INVITATION",
            email_subject=f"Invitation to {project.name}",
        )
    send_email(
        subject=f"Invitation to {project.name}",
        text_body=f"{message}\n\n{frontend_url(link)}",
        to_emails=[invitation.email],
    )
    return None


# ----- reading / marking -----

def mark_as_read(*, notification_id: int, user) -> Notification:
    obj = get_notification_by_id(notification_id)
    if obj is None:
        raise NotFound(f"Notification not found: {notification_id}")
    if obj.user_id != user.pk:
        raise PermissionDenied("You can only mark your own notifications as read")
    return repo.mark_read(obj)


def mark_all_as_read(*, user) -> int:
    count = repo.mark_all_read(user.pk)
    log.info("[notification] user=%s marked %s as read", user.pk, count)
    return count
