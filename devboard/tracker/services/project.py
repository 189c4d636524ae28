# ============================================
# tracker/services/project.py
# ============================================
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from tracker.models import IssueType, Label, Project, ProjectMember, WorkflowState
from tracker.models.project import project_key_validator
from tracker.services import access

logger = logging.getLogger(__name__)

DEFAULT_WORKFLOW_STATES = [
    # (name, terminal)
    ('Backlog', False),
    ('To Do', False),
    ('In Progress', False),
    ('Review', False),
    ('Testing', False),
    ('Done', True),
]

DEFAULT_ISSUE_TYPES = [
    # (name, icon, color)
    ('Story', '\U0001F4D6', '#0052CC'),
    ('Bug', '\U0001F41B', '#E34935'),
    ('Task', '✓', '#4BADE8'),
    ('Epic', '⚡', '#904EE2'),
]


class ProjectService:

    @staticmethod
    @transaction.atomic
    def create_project(
        *,
        name: str,
        key: str,
        owner,
        description: str = '',
    ) -> Project:
        """
        Create a project with the default workflow (Backlog ... Done, every
        transition allowed), the default issue types and the owner as
        OWNER member.
        """
        project_key_validator(key)

        if Project.objects.filter(key=key).exists():
            raise ValidationError(f"Project key '{key}' already exists")

        project = Project.objects.create(
            name=name,
            key=key,
            description=description or '',
            owner=owner,
        )

        WorkflowState.objects.bulk_create([
            WorkflowState(project=project, name=state_name, order=order, terminal=terminal)
            for order, (state_name, terminal) in enumerate(DEFAULT_WORKFLOW_STATES)
        ])
        IssueType.objects.bulk_create([
            IssueType(project=project, name=type_name, icon=icon, color=color)
            for type_name, icon, color in DEFAULT_ISSUE_TYPES
        ])
        ProjectMember.objects.create(project=project, user=owner, role=ProjectMember.Role.OWNER)

        logger.info("[project] %s created by user=%s", project.key, owner.id)
        return project

    @staticmethod
    def update_project(*, project: Project, user, **data) -> Project:
        """Update name/description. Owner only."""
        access.check_owner(project, user, "update project")

        changed = []
        for field in ('name', 'description'):
            if field in data and data[field] is not None and getattr(project, field) != data[field]:
                setattr(project, field, data[field])
                changed.append(field)

        if changed:
            project.save(update_fields=changed + ['updated_at'])
            logger.info("[project] %s updated by user=%s: %s", project.key, user.id, ', '.join(changed))
        return project

    @staticmethod
    def archive_project(*, project: Project, user) -> Project:
        access.check_owner(project, user, "archive project")
        if not project.archived:
            project.archived = True
            project.save(update_fields=['archived', 'updated_at'])
            logger.info("[project] %s archived by user=%s", project.key, user.id)
        return project

    @staticmethod
    def restore_project(*, project: Project, user) -> Project:
        access.check_owner(project, user, "restore project")
        if project.archived:
            project.archived = False
            project.save(update_fields=['archived', 'updated_at'])
            logger.info("[project] %s restored by user=%s", project.key, user.id)
        return project

    @staticmethod
    def create_label(*, project: Project, user, name: str, color: str = '') -> Label:
        access.check_can_edit(project, user)

        if Label.objects.filter(project=project, name=name).exists():
            raise ValidationError(f"Label '{name}' already exists in this project")

        label = Label(project=project, name=name)
        if color:
            label.color = color
        label.save()
        return label
