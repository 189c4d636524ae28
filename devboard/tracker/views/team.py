# ============================================
# tracker/views/team.py
# ============================================
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.selectors.project import ProjectSelector
from tracker.serializers.team import (
    AcceptInvitationSerializer,
    InviteMemberSerializer,
    ProjectInvitationOutputSerializer,
    ProjectMemberOutputSerializer,
    UpdateMemberRoleSerializer,
)
from tracker.services.team import TeamService
from tracker.views.utils import extend_schema, not_found, path_int, responses_ok, std_errors

PROJECT_ID = path_int("project_id", "Project ID")
MEMBER_ID = path_int("member_id", "Project member ID")


class InviteMemberAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="Invite a member by email (owner only)",
        parameters=[PROJECT_ID],
        request=InviteMemberSerializer,
        responses=responses_ok(ProjectInvitationOutputSerializer, code=201, extra=std_errors()),
    )
    def post(self, request, project_id):
        project = ProjectSelector.get_project_by_id(project_id)
        if not project:
            return not_found("Project")

        serializer = InviteMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        invitation = TeamService.invite_member(project=project, user=request.user, **serializer.validated_data)
        return Response(ProjectInvitationOutputSerializer(invitation).data, status=status.HTTP_201_CREATED)


class PendingInvitationsAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="Pending invitations (owner only)",
        parameters=[PROJECT_ID],
        responses=responses_ok(ProjectInvitationOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = ProjectSelector.get_project_by_id(project_id)
        if not project:
            return not_found("Project")

        invitations = TeamService.get_pending_invitations(project=project, user=request.user)
        return Response(ProjectInvitationOutputSerializer(invitations, many=True).data)


class InvitationDetailAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="Cancel invitation (owner only)",
        parameters=[path_int("invitation_id", "Invitation ID")],
        responses={204: None, **std_errors()},
    )
    def delete(self, request, invitation_id):
        TeamService.cancel_invitation(invitation_id=invitation_id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class AcceptInvitationAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="Accept invitation with its token",
        request=AcceptInvitationSerializer,
        responses=responses_ok(ProjectMemberOutputSerializer, extra=std_errors()),
    )
    def post(self, request):
        serializer = AcceptInvitationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        member = TeamService.accept_invitation(token=serializer.validated_data['token'], user=request.user)
        return Response(ProjectMemberOutputSerializer(member).data)


class ProjectMembersAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="List project members",
        parameters=[PROJECT_ID],
        responses=responses_ok(ProjectMemberOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = ProjectSelector.get_project_by_id(project_id)
        if not project:
            return not_found("Project")

        members = TeamService.get_members(project=project, user=request.user)
        return Response(ProjectMemberOutputSerializer(members, many=True).data)


class MemberRoleAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="Change member role (owner only)",
        parameters=[PROJECT_ID, MEMBER_ID],
        request=UpdateMemberRoleSerializer,
        responses=responses_ok(ProjectMemberOutputSerializer, extra=std_errors()),
    )
    def put(self, request, project_id, member_id):
        project = ProjectSelector.get_project_by_id(project_id)
        if not project:
            return not_found("Project")

        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        member = TeamService.update_member_role(
            project=project,
            member_id=member_id,
            role=serializer.validated_data['role'],
            user=request.user,
        )
        return Response(ProjectMemberOutputSerializer(member).data)


class MemberDetailAPIView(APIView):

    @extend_schema(
        tags=["Team"],
        summary="Remove member (owner only)",
        parameters=[PROJECT_ID, MEMBER_ID],
        responses={204: None, **std_errors()},
    )
    def delete(self, request, project_id, member_id):
        project = ProjectSelector.get_project_by_id(project_id)
        if not project:
            return not_found("Project")

        TeamService.remove_member(project=project, member_id=member_id, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
