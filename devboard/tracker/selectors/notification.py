from typing import Optional

from django.db.models import QuerySet

from tracker.models import Notification
from tracker.repositories import notification_repository as repo


def notifications_for_user(user_id: int, limit: int = 200) -> QuerySet:
    return repo.list_by_user(user_id, limit=limit)


def unread_notifications_for_user(user_id: int, limit: int = 200) -> QuerySet:
    return repo.list_by_user(user_id, unread_only=True, limit=limit)


def unread_count(user_id: int) -> int:
    return repo.count_unread(user_id)


def get_notification_by_id(notification_id: int) -> Optional[Notification]:
    return Notification.objects.filter(id=notification_id).first()
