# ============================================
# tracker/services/issue.py
# ============================================
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db.models import QuerySet

from tracker.exceptions import NotFound
from tracker.models import Issue, IssueHistory, IssueType, Label, Project, WorkflowState
from tracker.repositories import issue_repository as repo
from tracker.selectors.issue import IssueSelector
from tracker.services import access, numbering, ordering, workflow
from tracker.services import notification as notifications
from tracker.utils.retry import retry_on_conflict

logger = logging.getLogger(__name__)

User = get_user_model()


def _display(value) -> str:
    return '' if value is None else str(value)


class IssueService:

    @staticmethod
    def _log_history(issue: Issue, user, field_name: str, old_value, new_value) -> IssueHistory:
        """Append an entry to the issue's history"""
        return IssueHistory.objects.create(
            issue=issue,
            changed_by=user,
            field_name=field_name,
            old_value=_display(old_value),
            new_value=_display(new_value),
        )

    @staticmethod
    def _get_project(project_id: int) -> Project:
        try:
            return Project.objects.get(id=project_id)
        except Project.DoesNotExist:
            raise NotFound(f"Project not found: {project_id}")

    @staticmethod
    def _resolve_issue_type(project: Project, issue_type_id: int) -> IssueType:
        try:
            return IssueType.objects.get(id=issue_type_id, project=project)
        except IssueType.DoesNotExist:
            raise ValidationError("Issue type does not belong to this project")

    @staticmethod
    def _resolve_assignee(project: Project, assignee_id: Optional[int]):
        if assignee_id is None:
            return None
        try:
            assignee = User.objects.get(pk=assignee_id)
        except User.DoesNotExist:
            raise ValidationError(f"User not found: {assignee_id}")
        if not access.has_access(project, assignee):
            raise ValidationError("Assignee must be a member of the project")
        return assignee

    @staticmethod
    def _resolve_labels(project: Project, label_ids: Iterable[int]) -> List[Label]:
        label_ids = set(label_ids)
        labels = list(Label.objects.filter(project=project, id__in=label_ids))
        if len(labels) != len(label_ids):
            raise ValidationError("Labels must belong to this project")
        return labels

    @staticmethod
    def _check_story_points(story_points: Optional[int]) -> None:
        if story_points is not None and story_points <= 0:
            raise ValidationError("Story points must be a positive number")

    @staticmethod
    def _initial_state(project: Project, workflow_state_id: Optional[int]) -> WorkflowState:
        states = WorkflowState.objects.filter(project=project).order_by('order', 'id')
        if workflow_state_id is not None:
            state = states.filter(id=workflow_state_id).first()
            if state is None:
                raise ValidationError("Workflow state does not belong to this project")
            return state
        state = states.first()
        if state is None:
            raise ValidationError("Project has no workflow states")
        return state

    @staticmethod
    def create_issue(
        *,
        project_id: int,
        user,
        title: str,
        issue_type_id: int,
        description: str = '',
        priority: str = Issue.Priority.MEDIUM,
        assignee_id: Optional[int] = None,
        story_points: Optional[int] = None,
        due_date=None,
        label_ids: Optional[Iterable[int]] = None,
        workflow_state_id: Optional[int] = None,
    ) -> Issue:
        """
        Create an issue with the next PROJECT-N key.

        Input is validated before a number is allocated. The issue is
        appended to the bottom of the backlog and of its first column.
        """
        project = IssueService._get_project(project_id)
        access.check_can_edit(project, user)
        if project.archived:
            raise ValidationError("Cannot create issues in an archived project")

        issue_type = IssueService._resolve_issue_type(project, issue_type_id)
        state = IssueService._initial_state(project, workflow_state_id)
        assignee = IssueService._resolve_assignee(project, assignee_id)
        labels = IssueService._resolve_labels(project, label_ids or [])
        IssueService._check_story_points(story_points)

        def build(locked_project: Project, number: int, key: str) -> Issue:
            issue = Issue(
                project=locked_project,
                number=number,
                key=key,
                title=title,
                description=description or '',
                issue_type=issue_type,
                workflow_state=state,
                priority=priority,
                reporter=user,
                assignee=assignee,
                story_points=story_points,
                due_date=due_date,
            )
            ordering.append(issue, ordering.BACKLOG)
            ordering.append(issue, ordering.BOARD)
            issue.save()
            if labels:
                issue.labels.set(labels)
            IssueService._log_history(issue, user, 'created', None, f"Issue {key} created")
            return issue

        issue = numbering.allocate_and_create(project.id, build)
        logger.info("[issue] %s created by user=%s", issue.key, user.id)

        if assignee is not None:
            notifications.notify_assignment(issue, assignee, user)
        return issue

    @staticmethod
    def _lock_issue(issue_id: int) -> Issue:
        """
        Lock the issue for a write. The project row is locked first, the same
        order issue creation takes its locks in.
        """
        issue = repo.get_by_id(issue_id)
        if issue is None:
            raise NotFound(f"Issue not found: {issue_id}")
        numbering.lock_project(issue.project_id)
        return repo.get_by_id(issue_id, for_update=True)

    @staticmethod
    @retry_on_conflict('POSITION_MAX_RETRIES')
    def _apply_update(issue_id: int, user, data: Dict) -> Tuple[Issue, Dict[str, Tuple]]:
        issue = IssueService._lock_issue(issue_id)
        project = issue.project
        access.check_can_edit(project, user)

        changes: Dict[str, Tuple] = {}

        for field in ('title', 'description', 'priority', 'due_date'):
            if field in data:
                old_value = getattr(issue, field)
                new_value = data[field]
                if field == 'description':
                    new_value = new_value or ''
                if old_value != new_value:
                    changes[field] = (old_value, new_value)
                    setattr(issue, field, new_value)

        if 'story_points' in data:
            IssueService._check_story_points(data['story_points'])
            if issue.story_points != data['story_points']:
                changes['story_points'] = (issue.story_points, data['story_points'])
                issue.story_points = data['story_points']

        if 'issue_type_id' in data:
            issue_type = IssueService._resolve_issue_type(project, data['issue_type_id'])
            if issue_type.id != issue.issue_type_id:
                changes['type'] = (issue.issue_type.name, issue_type.name)
                issue.issue_type = issue_type

        if 'assignee_id' in data:
            assignee = IssueService._resolve_assignee(project, data['assignee_id'])
            if (assignee.pk if assignee else None) != issue.assignee_id:
                changes['assignee'] = (
                    issue.assignee.username if issue.assignee else None,
                    assignee.username if assignee else None,
                )
                issue.assignee = assignee

        if data.get('workflow_state_id') is not None:
            target = workflow.resolve_target(data['workflow_state_id'])
            current = issue.workflow_state
            workflow.validate_transition(current, target)
            if target.id != current.id:
                changes['status'] = (current.name, target.name)
                issue.workflow_state = target

        # backlog before board, the order create_issue places in
        if data.get('backlog_position') is not None:
            ordering.place_at(issue, ordering.BACKLOG, data['backlog_position'])
        if data.get('board_position') is not None:
            ordering.place_at(issue, ordering.BOARD, data['board_position'])
        elif 'status' in changes:
            ordering.append(issue, ordering.BOARD)

        issue.save()

        if 'label_ids' in data:
            labels = IssueService._resolve_labels(project, data['label_ids'] or [])
            old_names = sorted(label.name for label in issue.labels.all())
            new_names = sorted(label.name for label in labels)
            if old_names != new_names:
                changes['labels'] = (', '.join(old_names), ', '.join(new_names))
                issue.labels.set(labels)

        for field_name, (old_val, new_val) in changes.items():
            IssueService._log_history(issue, user, field_name, old_val, new_val)

        return issue, changes

    @staticmethod
    def update_issue(*, issue_id: int, user, **data) -> Issue:
        """
        Partial update. Every changed field gets a history entry; a
        workflow state change is checked against the current state's
        allow-list and rejected without any mutation.
        """
        issue, changes = IssueService._apply_update(issue_id, user, data)
        if changes:
            logger.info("[issue] %s updated by user=%s: %s", issue.key, user.id, ', '.join(changes))

        if 'assignee' in changes and issue.assignee is not None:
            notifications.notify_assignment(issue, issue.assignee, user)
        if 'status' in changes:
            old_state, new_state = changes['status']
            notifications.notify_status_change(issue, old_state, new_state, user)
        other = [f for f in changes if f not in ('assignee', 'status')]
        notifications.notify_issue_updated(issue, other, user)
        return issue

    @staticmethod
    @retry_on_conflict('POSITION_MAX_RETRIES')
    def move_issue(
        *,
        issue_id: int,
        user,
        list_kind: str,
        before_id: Optional[int] = None,
        after_id: Optional[int] = None,
    ) -> Issue:
        """Drag-and-drop: place the issue between two neighbours of one list"""
        issue = IssueService._lock_issue(issue_id)
        access.check_can_edit(issue.project, user)
        ordering.move_between(issue, list_kind, before_id=before_id, after_id=after_id)
        return issue

    @staticmethod
    def get_history(*, issue: Issue, user) -> QuerySet:
        access.check_access(issue.project, user)
        return IssueSelector.get_history(issue.id)

    @staticmethod
    def check_can_view(issue: Issue, user) -> None:
        if not access.has_access(issue.project, user):
            raise PermissionDenied("You do not have access to this issue")
