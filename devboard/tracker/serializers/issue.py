# ============================================
# tracker/serializers/issue.py
# ============================================
from rest_framework import serializers

from tracker.models import Issue, IssueHistory
from tracker.repositories.issue_repository import BACKLOG, BOARD, POSITION_MAX, POSITION_MIN
from tracker.serializers.project import IssueTypeOutputSerializer, LabelOutputSerializer
from tracker.serializers.user import UserBriefSerializer


class IssueCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    issue_type_id = serializers.IntegerField()
    priority = serializers.ChoiceField(
        choices=Issue.Priority.choices,
        default=Issue.Priority.MEDIUM
    )
    workflow_state_id = serializers.IntegerField(required=False, allow_null=True)
    assignee_id = serializers.IntegerField(required=False, allow_null=True)
    story_points = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    due_date = serializers.DateField(required=False, allow_null=True)
    label_ids = serializers.ListField(
        child=serializers.IntegerField(),
        required=False,
        default=list
    )


class IssueUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    issue_type_id = serializers.IntegerField(required=False)
    priority = serializers.ChoiceField(
        choices=Issue.Priority.choices,
        required=False
    )
    workflow_state_id = serializers.IntegerField(required=False)
    assignee_id = serializers.IntegerField(required=False, allow_null=True)
    story_points = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    due_date = serializers.DateField(required=False, allow_null=True)
    label_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    board_position = serializers.IntegerField(
        required=False, allow_null=True, min_value=POSITION_MIN, max_value=POSITION_MAX
    )
    backlog_position = serializers.IntegerField(
        required=False, allow_null=True, min_value=POSITION_MIN, max_value=POSITION_MAX
    )


class IssueMoveSerializer(serializers.Serializer):
    list = serializers.ChoiceField(choices=[BOARD, BACKLOG])
    before_id = serializers.IntegerField(required=False, allow_null=True)
    after_id = serializers.IntegerField(required=False, allow_null=True)


class IssueOutputSerializer(serializers.ModelSerializer):
    project_id = serializers.IntegerField(read_only=True)
    project_key = serializers.CharField(source='project.key', read_only=True)
    issue_type = IssueTypeOutputSerializer(read_only=True)
    workflow_state_id = serializers.IntegerField(read_only=True)
    workflow_state_name = serializers.CharField(source='workflow_state.name', read_only=True)
    assignee = UserBriefSerializer(read_only=True)
    reporter = UserBriefSerializer(read_only=True)
    labels = LabelOutputSerializer(many=True, read_only=True)
    overdue = serializers.BooleanField(read_only=True)

    class Meta:
        model = Issue
        fields = [
            'id', 'key', 'number', 'project_id', 'project_key',
            'title', 'description', 'issue_type', 'priority',
            'workflow_state_id', 'workflow_state_name',
            'assignee', 'reporter', 'story_points', 'due_date', 'overdue',
            'labels', 'board_position', 'backlog_position',
            'created_at', 'updated_at'
        ]


class IssueListOutputSerializer(serializers.ModelSerializer):
    """Lighter serializer for list, backlog and board views"""
    issue_type = serializers.CharField(source='issue_type.name', read_only=True)
    workflow_state_id = serializers.IntegerField(read_only=True)
    assignee = serializers.SerializerMethodField()
    label_names = serializers.SerializerMethodField()

    class Meta:
        model = Issue
        fields = [
            'id', 'key', 'number', 'title', 'issue_type', 'priority',
            'workflow_state_id', 'assignee', 'story_points', 'due_date',
            'label_names', 'board_position', 'backlog_position'
        ]

    def get_assignee(self, obj):
        if obj.assignee is None:
            return None
        return {'id': obj.assignee.id, 'username': obj.assignee.username}

    def get_label_names(self, obj) -> list[str]:
        return [label.name for label in obj.labels.all()]


class BoardColumnSerializer(serializers.Serializer):
    workflow_state_id = serializers.IntegerField()
    name = serializers.CharField()
    order = serializers.IntegerField()
    terminal = serializers.BooleanField()
    issue_count = serializers.IntegerField()
    issues = IssueListOutputSerializer(many=True)


class IssueHistoryOutputSerializer(serializers.ModelSerializer):
    changed_by = UserBriefSerializer(read_only=True)

    class Meta:
        model = IssueHistory
        fields = ['id', 'field_name', 'old_value', 'new_value', 'changed_by', 'changed_at']
