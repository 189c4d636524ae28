# ============================================
# tracker/services/team.py
# ============================================
import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction

from tracker.exceptions import NotFound
from tracker.models import Project, ProjectInvitation, ProjectMember
from tracker.selectors.team import TeamSelector
from tracker.services import access
from tracker.services import notification as notifications

logger = logging.getLogger(__name__)

User = get_user_model()

Role = ProjectMember.Role


class TeamService:

    @staticmethod
    def _member_of(project: Project, member_id: int) -> ProjectMember:
        member = TeamSelector.get_member_by_id(member_id)
        if member is None:
            raise NotFound(f"Member not found: {member_id}")
        if member.project_id != project.id:
            raise ValidationError("Member does not belong to this project")
        return member

    @staticmethod
    def _owner_count(project: Project) -> int:
        return ProjectMember.objects.filter(project=project, role=Role.OWNER).count()

    @staticmethod
    @transaction.atomic
    def invite_member(*, project: Project, user, email: str, role: str = Role.MEMBER) -> ProjectInvitation:
        """
        Owner invites someone by email. Registered users also get an
        in-app notification.
        """
        access.check_owner(project, user, "invite members")
        email = email.strip()

        if ProjectMember.objects.filter(project=project, user__email__iexact=email).exists():
            raise ValidationError("User is already a member of this project")

        pending = ProjectInvitation.objects.filter(
            project=project, email__iexact=email, status=ProjectInvitation.Status.PENDING
        )
        if any(inv.is_pending for inv in pending):
            raise ValidationError("There is already a pending invitation for this email")

        invitation = ProjectInvitation.objects.create(
            project=project,
            email=email,
            role=role,
            invited_by=user,
        )
        logger.info("[team] %s invited %s as %s by user=%s", project.key, email, role, user.id)

        invitee = User.objects.filter(email__iexact=email).first()
        notifications.notify_invitation(invitation, invitee)
        return invitation

    @staticmethod
    def get_pending_invitations(*, project: Project, user):
        access.check_owner(project, user, "view invitations")
        return TeamSelector.get_pending_invitations(project.id)

    @staticmethod
    def cancel_invitation(*, invitation_id: int, user) -> ProjectInvitation:
        invitation = TeamSelector.get_invitation_by_id(invitation_id)
        if invitation is None:
            raise NotFound(f"Invitation not found: {invitation_id}")
        access.check_owner(invitation.project, user, "cancel invitations")
        if invitation.status != ProjectInvitation.Status.PENDING:
            raise ValidationError("Only pending invitations can be cancelled")

        invitation.cancel()
        invitation.save(update_fields=['status', 'responded_at'])
        logger.info("[team] invitation #%s cancelled by user=%s", invitation.id, user.id)
        return invitation

    @staticmethod
    def accept_invitation(*, token: str, user) -> ProjectMember:
        """
        The invited user joins with the invitation's role. The user's
        email must match the invitation.
        """
        invitation = TeamSelector.get_invitation_by_token(token)
        if invitation is None:
            raise ValidationError("Invalid invitation token")

        if (user.email or '').lower() != invitation.email.lower():
            raise PermissionDenied("This invitation is for a different email address")

        if not invitation.is_pending:
            if invitation.status == ProjectInvitation.Status.PENDING and invitation.is_expired:
                invitation.status = ProjectInvitation.Status.EXPIRED
                invitation.save(update_fields=['status'])
                raise ValidationError("This invitation has expired")
            raise ValidationError("This invitation is no longer valid")

        with transaction.atomic():
            project = invitation.project
            if ProjectMember.objects.filter(project=project, user=user).exists():
                raise ValidationError("You are already a member of this project")

            invitation.accept()
            invitation.save(update_fields=['status', 'responded_at'])
            member = ProjectMember.objects.create(project=project, user=user, role=invitation.role)

        logger.info("[team] user=%s joined %s as %s", user.id, project.key, member.role)
        return member

    @staticmethod
    def get_members(*, project: Project, user):
        access.check_access(project, user)
        return TeamSelector.get_members(project.id)

    @staticmethod
    @transaction.atomic
    def update_member_role(*, project: Project, member_id: int, role: str, user) -> ProjectMember:
        access.check_owner(project, user, "change member roles")
        member = TeamService._member_of(project, member_id)

        if member.role == Role.OWNER and role != Role.OWNER:
            if member.user_id == project.owner_id:
                raise ValidationError("Cannot change the role of the project owner")
            if TeamService._owner_count(project) <= 1:
                raise ValidationError("At least one owner must remain in the project")

        if member.role != role:
            logger.info(
                "[team] %s member=%s role %s -> %s by user=%s",
                project.key, member.user_id, member.role, role, user.id
            )
            member.role = role
            member.save(update_fields=['role'])
        return member

    @staticmethod
    @transaction.atomic
    def remove_member(*, project: Project, member_id: int, user) -> None:
        access.check_owner(project, user, "remove members")
        member = TeamService._member_of(project, member_id)

        if member.user_id == project.owner_id:
            raise ValidationError("Cannot remove project owner")
        if member.role == Role.OWNER and TeamService._owner_count(project) <= 1:
            raise ValidationError("Cannot remove the last owner from the project")

        member.delete()
        logger.info("[team] %s member=%s removed by user=%s", project.key, member.user_id, user.id)
