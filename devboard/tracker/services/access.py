# ============================================
# tracker/services/access.py
# ============================================
from typing import Optional

from django.core.exceptions import PermissionDenied

from tracker.models import Project, ProjectMember


def get_role(project: Project, user) -> Optional[str]:
    """Role of user in project; the project owner is always OWNER"""
    if user is None or not user.is_authenticated:
        return None
    if project.is_owner(user):
        return ProjectMember.Role.OWNER
    return (
        ProjectMember.objects
        .filter(project=project, user=user)
        .values_list('role', flat=True)
        .first()
    )


def has_access(project: Project, user) -> bool:
    return get_role(project, user) is not None


def check_access(project: Project, user) -> str:
    role = get_role(project, user)
    if role is None:
        raise PermissionDenied("You do not have access to this project")
    return role


def check_can_edit(project: Project, user) -> None:
    """Viewers are read-only"""
    if check_access(project, user) == ProjectMember.Role.VIEWER:
        raise PermissionDenied("Viewers cannot modify this project")


def check_owner(project: Project, user, action: str = "perform this action") -> None:
    if get_role(project, user) != ProjectMember.Role.OWNER:
        raise PermissionDenied(f"Only project owner can {action}")
