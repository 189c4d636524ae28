# ============================================
# tracker/views/notification.py
# ============================================
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.selectors.notification import (
    notifications_for_user,
    unread_count,
    unread_notifications_for_user,
)
from tracker.serializers.notification import NotificationSerializer, UnreadCountSerializer
from tracker.services import notification as svc
from tracker.views.utils import (
    extend_schema, inline_serializer, path_int, responses_ok, std_errors,
)


class NotificationListAPIView(APIView):

    @extend_schema(
        tags=["Notifications"],
        summary="My notifications, newest first",
        responses=responses_ok(NotificationSerializer, many=True, extra=std_errors()),
    )
    def get(self, request):
        qs = notifications_for_user(request.user.id)
        return Response(NotificationSerializer(qs, many=True).data)


class UnreadNotificationListAPIView(APIView):

    @extend_schema(
        tags=["Notifications"],
        summary="My unread notifications",
        responses=responses_ok(NotificationSerializer, many=True, extra=std_errors()),
    )
    def get(self, request):
        qs = unread_notifications_for_user(request.user.id)
        return Response(NotificationSerializer(qs, many=True).data)


class UnreadCountAPIView(APIView):

    @extend_schema(
        tags=["Notifications"],
        summary="Number of unread notifications",
        responses=responses_ok(UnreadCountSerializer, extra=std_errors()),
    )
    def get(self, request):
        return Response({"count": unread_count(request.user.id)})


class NotificationReadAPIView(APIView):

    @extend_schema(
        tags=["Notifications"],
        summary="Mark one notification as read",
        parameters=[path_int("notification_id", "Notification ID")],
        request=None,
        responses=responses_ok(NotificationSerializer, extra=std_errors()),
    )
    def put(self, request, notification_id):
        obj = svc.mark_as_read(notification_id=notification_id, user=request.user)
        return Response(NotificationSerializer(obj).data)


class NotificationReadAllAPIView(APIView):

    @extend_schema(
        tags=["Notifications"],
        summary="Mark all my notifications as read",
        request=None,
        responses=responses_ok(
            inline_serializer(name="MarkedRead", fields={"updated": serializers.IntegerField()}),
            extra=std_errors(),
        ),
    )
    def put(self, request):
        updated = svc.mark_all_as_read(user=request.user)
        return Response({"updated": updated})
