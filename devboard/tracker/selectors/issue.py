# ============================================
# tracker/selectors/issue.py
# ============================================
from typing import Dict, List, Optional

from django.db.models import F, Q, QuerySet

from tracker.models import Issue, IssueHistory, WorkflowState
from tracker.repositories import issue_repository as repo


class IssueSelector:

    @staticmethod
    def _base() -> QuerySet:
        return Issue.objects.select_related(
            'project', 'issue_type', 'workflow_state', 'reporter', 'assignee'
        ).prefetch_related('labels')

    @staticmethod
    def get_issue_by_id(issue_id: int) -> Optional[Issue]:
        """Get single issue with related data"""
        try:
            return IssueSelector._base().get(id=issue_id)
        except Issue.DoesNotExist:
            return None

    @staticmethod
    def get_issue_by_key(key: str) -> Optional[Issue]:
        """Get issue by key"""
        try:
            return IssueSelector._base().get(key=key)
        except Issue.DoesNotExist:
            return None

    @staticmethod
    def get_issues_list(
        project_id: int,
        workflow_state_id: int = None,
        assignee_id: int = None,
        priority: str = None,
        search: str = None
    ) -> QuerySet:
        """Get filtered issues of a project, newest number first"""
        queryset = IssueSelector._base().filter(project_id=project_id)

        if workflow_state_id:
            queryset = queryset.filter(workflow_state_id=workflow_state_id)

        if assignee_id:
            queryset = queryset.filter(assignee_id=assignee_id)

        if priority:
            queryset = queryset.filter(priority=priority)

        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) |
                Q(description__icontains=search) |
                Q(key__icontains=search)
            )

        return queryset.order_by('-number')

    @staticmethod
    def get_issues_assigned_to(user_id: int) -> QuerySet:
        return (
            IssueSelector._base()
            .filter(assignee_id=user_id, project__archived=False)
            .order_by(F('due_date').asc(nulls_last=True), '-updated_at')
        )

    @staticmethod
    def get_backlog(project_id: int) -> List[Issue]:
        """Issues of the project in backlog priority order"""
        queryset = repo.list_queryset(repo.BACKLOG, project_id=project_id)
        return list(queryset.select_related(
            'project', 'issue_type', 'workflow_state', 'reporter', 'assignee'
        ).prefetch_related('labels'))

    @staticmethod
    def get_board(project_id: int) -> List[Dict]:
        """One entry per workflow state with its issues in board order"""
        columns = []
        states = WorkflowState.objects.filter(project_id=project_id).order_by('order', 'id')
        for state in states:
            queryset = repo.list_queryset(
                repo.BOARD, project_id=project_id, workflow_state_id=state.id
            )
            issues = list(queryset.select_related(
                'project', 'issue_type', 'workflow_state', 'reporter', 'assignee'
            ).prefetch_related('labels'))
            columns.append({
                'workflow_state_id': state.id,
                'name': state.name,
                'order': state.order,
                'terminal': state.terminal,
                'issue_count': len(issues),
                'issues': issues,
            })
        return columns

    @staticmethod
    def get_history(issue_id: int) -> QuerySet:
        return (
            IssueHistory.objects
            .filter(issue_id=issue_id)
            .select_related('changed_by')
            .order_by('-changed_at', '-id')
        )
