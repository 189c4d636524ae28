# ============================================
# tracker/serializers/comment.py
# ============================================
from rest_framework import serializers

from tracker.models import Comment
from tracker.serializers.user import UserBriefSerializer


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField()


class CommentUpdateSerializer(serializers.Serializer):
    content = serializers.CharField()


class CommentOutputSerializer(serializers.ModelSerializer):
    author = UserBriefSerializer(read_only=True)
    mentioned_usernames = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = [
            'id', 'issue_id', 'author', 'content', 'is_edited',
            'mentioned_usernames', 'created_at', 'updated_at'
        ]

    def get_mentioned_usernames(self, obj) -> list[str]:
        return [m.mentioned_user.username for m in obj.mentions.select_related('mentioned_user')]
