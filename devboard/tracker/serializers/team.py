# ============================================
# tracker/serializers/team.py
# ============================================
from rest_framework import serializers

from tracker.models import ProjectInvitation, ProjectMember
from tracker.serializers.user import UserBriefSerializer


class InviteMemberSerializer(serializers.Serializer):
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=ProjectMember.Role.choices, default=ProjectMember.Role.MEMBER)


class AcceptInvitationSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)


class UpdateMemberRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=ProjectMember.Role.choices)


class ProjectMemberOutputSerializer(serializers.ModelSerializer):
    user = UserBriefSerializer(read_only=True)

    class Meta:
        model = ProjectMember
        fields = ['id', 'project_id', 'user', 'role', 'joined_at']


class ProjectInvitationOutputSerializer(serializers.ModelSerializer):
    project_name = serializers.CharField(source='project.name', read_only=True)
    invited_by = serializers.CharField(source='invited_by.username', read_only=True)

    class Meta:
        model = ProjectInvitation
        fields = [
            'id', 'project_id', 'project_name', 'email', 'role', 'invited_by',
            'status', 'created_at', 'expires_at', 'responded_at'
        ]
