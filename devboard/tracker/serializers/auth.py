from rest_framework import serializers

from tracker.serializers.user import UserBriefSerializer


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class LoginOutputSerializer(serializers.Serializer):
    user = UserBriefSerializer()


class RegisterSerializer(serializers.Serializer):
    username = serializers.RegexField(
        r'^[a-zA-Z0-9_]{3,50}$',
        error_messages={'invalid': '3-50 letters, digits or underscores'},
    )
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    full_name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class TokenLinkSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(TokenLinkSerializer):
    new_password = serializers.CharField(write_only=True, trim_whitespace=False)


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField()


class RegisterOutputSerializer(MessageSerializer):
    user = UserBriefSerializer()
