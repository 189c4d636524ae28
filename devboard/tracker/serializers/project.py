# ============================================
# tracker/serializers/project.py
# ============================================
from rest_framework import serializers

from tracker.models import IssueType, Label, Project, WorkflowState
from tracker.models.project import project_key_validator
from tracker.serializers.user import UserBriefSerializer


class ProjectCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    key = serializers.CharField(max_length=10, validators=[project_key_validator])
    description = serializers.CharField(required=False, allow_blank=True, default='')


class ProjectUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class ProjectOutputSerializer(serializers.ModelSerializer):
    owner = UserBriefSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            'id', 'name', 'key', 'description', 'owner',
            'archived', 'member_count', 'created_at', 'updated_at'
        ]

    def get_member_count(self, obj) -> int:
        count = getattr(obj, 'member_count', None)
        if count is None:
            count = obj.members.count()
        return count


class WorkflowStateOutputSerializer(serializers.ModelSerializer):
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = WorkflowState
        fields = ['id', 'name', 'order', 'terminal', 'allowed_transitions']

    def get_allowed_transitions(self, obj) -> list[int]:
        return sorted(obj.allowed_transition_ids)


class WorkflowTransitionsSerializer(serializers.Serializer):
    allowed_transitions = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=True
    )


class IssueTypeOutputSerializer(serializers.ModelSerializer):
    class Meta:
        model = IssueType
        fields = ['id', 'name', 'icon', 'color']


class LabelCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    color = serializers.RegexField(r'^#[0-9A-Fa-f]{6}$', required=False, allow_blank=True)


class LabelOutputSerializer(serializers.ModelSerializer):
    class Meta:
        model = Label
        fields = ['id', 'name', 'color']
