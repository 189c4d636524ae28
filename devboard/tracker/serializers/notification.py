from rest_framework import serializers

from tracker.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id", "type", "message", "link", "related_entity_id",
            "related_entity_type", "is_read", "created_at", "read_at",
        ]
        read_only_fields = fields


class UnreadCountSerializer(serializers.Serializer):
    count = serializers.IntegerField()
