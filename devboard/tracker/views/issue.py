# ============================================
# tracker/views/issue.py
# ============================================
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.selectors.issue import IssueSelector
from tracker.serializers.issue import (
    IssueHistoryOutputSerializer,
    IssueListOutputSerializer,
    IssueMoveSerializer,
    IssueOutputSerializer,
    IssueUpdateSerializer,
)
from tracker.services.issue import IssueService
from tracker.utils.pagination import IssuePagination
from tracker.views.utils import (
    CONFLICT, extend_schema, not_found, path_int, path_str, q_int,
    responses_ok, std_errors,
)

ISSUE_ID = path_int("issue_id", "Issue ID")


class IssueDetailAPIView(APIView):
    """
    GET: Retrieve issue details
    PUT: Partial update; may carry workflow_state_id, board_position, backlog_position

    Path params:
    - issue_id: int
    """

    @extend_schema(
        tags=["Issues"],
        summary="Get issue",
        parameters=[ISSUE_ID],
        responses=responses_ok(IssueOutputSerializer, extra=std_errors()),
    )
    def get(self, request, issue_id):
        issue = IssueSelector.get_issue_by_id(issue_id)

        if not issue:
            return not_found("Issue")

        IssueService.check_can_view(issue, request.user)
        return Response(IssueOutputSerializer(issue).data)

    @extend_schema(
        tags=["Issues"],
        summary="Update issue",
        description=(
            "Only the fields present are changed and each change is recorded in the history. "
            "A workflow state change must be allowed by the current state's transitions."
        ),
        parameters=[ISSUE_ID],
        request=IssueUpdateSerializer,
        responses=responses_ok(IssueOutputSerializer, extra=std_errors(CONFLICT)),
    )
    def put(self, request, issue_id):
        serializer = IssueUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        IssueService.update_issue(issue_id=issue_id, user=request.user, **serializer.validated_data)

        issue = IssueSelector.get_issue_by_id(issue_id)
        return Response(IssueOutputSerializer(issue).data)


class IssueByKeyAPIView(APIView):

    @extend_schema(
        tags=["Issues"],
        summary="Get issue by key (e.g. DEV-42)",
        parameters=[path_str("key", "Issue key")],
        responses=responses_ok(IssueOutputSerializer, extra=std_errors()),
    )
    def get(self, request, key):
        issue = IssueSelector.get_issue_by_key(key.upper())

        if not issue:
            return not_found("Issue")

        IssueService.check_can_view(issue, request.user)
        return Response(IssueOutputSerializer(issue).data)


class IssueHistoryAPIView(APIView):

    @extend_schema(
        tags=["Issues"],
        summary="Change history, newest first",
        parameters=[ISSUE_ID],
        responses=responses_ok(IssueHistoryOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, issue_id):
        issue = IssueSelector.get_issue_by_id(issue_id)

        if not issue:
            return not_found("Issue")

        history = IssueService.get_history(issue=issue, user=request.user)
        return Response(IssueHistoryOutputSerializer(history, many=True).data)


class IssueMoveAPIView(APIView):
    """
    POST: Drag-and-drop reorder inside the backlog or the issue's board column

    Request body:
    - list: "board" | "backlog"
    - before_id: int | null (issue right above the new slot)
    - after_id: int | null (issue right below the new slot)
    """

    @extend_schema(
        tags=["Issues"],
        summary="Move issue between two neighbours",
        parameters=[ISSUE_ID],
        request=IssueMoveSerializer,
        responses=responses_ok(IssueOutputSerializer, extra=std_errors(CONFLICT)),
    )
    def post(self, request, issue_id):
        serializer = IssueMoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        IssueService.move_issue(
            issue_id=issue_id,
            user=request.user,
            list_kind=data['list'],
            before_id=data.get('before_id'),
            after_id=data.get('after_id'),
        )

        issue = IssueSelector.get_issue_by_id(issue_id)
        return Response(IssueOutputSerializer(issue).data)


class MyIssuesAPIView(APIView):

    @extend_schema(
        tags=["Issues"],
        summary="Issues assigned to me",
        parameters=[q_int("page", "Page (default 1)"), q_int("page_size", "Page size")],
        responses=responses_ok(IssueListOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request):
        issues = IssueSelector.get_issues_assigned_to(request.user.id)

        paginator = IssuePagination()
        page = paginator.paginate_queryset(issues, request)
        serializer = IssueListOutputSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)
