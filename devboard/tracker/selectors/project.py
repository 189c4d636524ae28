# ============================================
# tracker/selectors/project.py
# ============================================
from typing import List, Optional

from django.db.models import Count, Q, QuerySet

from tracker.models import IssueType, Label, Project, WorkflowState


class ProjectSelector:

    @staticmethod
    def get_project_by_id(project_id: int) -> Optional[Project]:
        """Get single project by ID"""
        try:
            return Project.objects.select_related('owner').get(id=project_id)
        except Project.DoesNotExist:
            return None

    @staticmethod
    def get_project_by_key(key: str) -> Optional[Project]:
        """Get project by key"""
        try:
            return Project.objects.select_related('owner').get(key=key)
        except Project.DoesNotExist:
            return None

    @staticmethod
    def get_projects_for_user(user_id: int, include_archived: bool = False) -> QuerySet:
        """Projects where user is owner or member"""
        queryset = Project.objects.filter(
            Q(owner_id=user_id) | Q(members__user_id=user_id)
        ).distinct()

        if not include_archived:
            queryset = queryset.filter(archived=False)

        return (
            queryset
            .select_related('owner')
            .annotate(member_count=Count('members', distinct=True))
            .order_by('-created_at')
        )

    @staticmethod
    def get_workflow_states(project_id: int) -> List[WorkflowState]:
        return list(WorkflowState.objects.filter(project_id=project_id).order_by('order', 'id'))

    @staticmethod
    def get_workflow_state_by_id(state_id: int) -> Optional[WorkflowState]:
        try:
            return WorkflowState.objects.select_related('project').get(id=state_id)
        except WorkflowState.DoesNotExist:
            return None

    @staticmethod
    def get_issue_types(project_id: int) -> QuerySet:
        return IssueType.objects.filter(project_id=project_id).order_by('id')

    @staticmethod
    def get_labels(project_id: int) -> QuerySet:
        return Label.objects.filter(project_id=project_id).order_by('name')
