# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Optional

from django.db.models import QuerySet
from django.utils import timezone

from tracker.models import Notification


def create_notification(
    *,
    user,
    type: str,
    message: str,
    link: str = "",
    related_entity_id: Optional[int] = None,
    related_entity_type: str = "",
) -> Notification:
    return Notification.objects.create(
        user=user,
        type=type,
        message=message[:500],
        link=link,
        related_entity_id=related_entity_id,
        related_entity_type=related_entity_type,
    )


def list_by_user(user_id: int, *, unread_only: bool = False, limit: int = 200) -> QuerySet:
    qs = Notification.objects.filter(user_id=user_id)
    if unread_only:
        qs = qs.filter(is_read=False)
    return qs.order_by("-created_at", "-id")[:limit]


def count_unread(user_id: int) -> int:
    return Notification.objects.filter(user_id=user_id, is_read=False).count()


def mark_read(notification: Notification) -> Notification:
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at"])
    return notification


def mark_all_read(user_id: int) -> int:
    return (
        Notification.objects
        .filter(user_id=user_id, is_read=False)
        .update(is_read=True, read_at=timezone.now())
    )
