# ============================================
# tracker/selectors/team.py
# ============================================
from typing import Optional

from django.db.models import QuerySet

from tracker.models import ProjectInvitation, ProjectMember


class TeamSelector:

    @staticmethod
    def get_members(project_id: int) -> QuerySet:
        return (
            ProjectMember.objects
            .filter(project_id=project_id)
            .select_related('user')
            .order_by('joined_at', 'id')
        )

    @staticmethod
    def get_member_by_id(member_id: int) -> Optional[ProjectMember]:
        try:
            return ProjectMember.objects.select_related('user', 'project').get(id=member_id)
        except ProjectMember.DoesNotExist:
            return None

    @staticmethod
    def get_pending_invitations(project_id: int) -> QuerySet:
        return (
            ProjectInvitation.objects
            .filter(project_id=project_id, status=ProjectInvitation.Status.PENDING)
            .select_related('project', 'invited_by')
            .order_by('-created_at')
        )

    @staticmethod
    def get_invitation_by_id(invitation_id: int) -> Optional[ProjectInvitation]:
        try:
            return ProjectInvitation.objects.select_related('project').get(id=invitation_id)
        except ProjectInvitation.DoesNotExist:
            return None

    @staticmethod
    def get_invitation_by_token(token: str) -> Optional[ProjectInvitation]:
        try:
            return ProjectInvitation.objects.select_related('project', 'invited_by').get(token=token)
        except ProjectInvitation.DoesNotExist:
            return None
