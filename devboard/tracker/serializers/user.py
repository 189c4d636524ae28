# ============================================
# tracker/serializers/user.py
# ============================================
from django.contrib.auth import get_user_model
from rest_framework import serializers


class UserBriefSerializer(serializers.ModelSerializer):
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ['id', 'username', 'email', 'full_name']

    def get_full_name(self, obj) -> str:
        return obj.get_full_name() or obj.username
