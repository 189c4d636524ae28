# ============================================
# tracker/views/comment.py
# ============================================
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.selectors.comment import CommentSelector
from tracker.selectors.issue import IssueSelector
from tracker.serializers.comment import (
    CommentCreateSerializer,
    CommentOutputSerializer,
    CommentUpdateSerializer,
)
from tracker.services.comment import CommentService
from tracker.views.utils import extend_schema, not_found, path_int, responses_ok, std_errors


class CommentListCreateAPIView(APIView):
    """
    GET: List comments for an issue, oldest first
    POST: Create a comment; @username mentions notify project members

    Path params:
    - issue_id: int

    Request body (POST):
    - content: string (required)
    """

    @extend_schema(
        tags=["Comments"],
        summary="List comments",
        parameters=[path_int("issue_id", "Issue ID")],
        responses=responses_ok(CommentOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, issue_id):
        issue = IssueSelector.get_issue_by_id(issue_id)

        if not issue:
            return not_found("Issue")

        comments = CommentService.get_comments(issue=issue, user=request.user)
        return Response(CommentOutputSerializer(comments, many=True).data)

    @extend_schema(
        tags=["Comments"],
        summary="Add comment",
        parameters=[path_int("issue_id", "Issue ID")],
        request=CommentCreateSerializer,
        responses=responses_ok(CommentOutputSerializer, code=201, extra=std_errors()),
    )
    def post(self, request, issue_id):
        issue = IssueSelector.get_issue_by_id(issue_id)

        if not issue:
            return not_found("Issue")

        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = CommentService.create_comment(
            issue=issue,
            author=request.user,
            **serializer.validated_data
        )
        return Response(CommentOutputSerializer(comment).data, status=status.HTTP_201_CREATED)


class CommentDetailAPIView(APIView):
    """
    PUT: Update comment (author only)
    DELETE: Delete comment (author or project owner)

    Path params:
    - comment_id: int
    """

    @extend_schema(
        tags=["Comments"],
        summary="Edit comment",
        parameters=[path_int("comment_id", "Comment ID")],
        request=CommentUpdateSerializer,
        responses=responses_ok(CommentOutputSerializer, extra=std_errors()),
    )
    def put(self, request, comment_id):
        comment = CommentSelector.get_comment_by_id(comment_id)

        if not comment:
            return not_found("Comment")

        serializer = CommentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = CommentService.update_comment(
            comment=comment,
            user=request.user,
            **serializer.validated_data
        )
        return Response(CommentOutputSerializer(comment).data)

    @extend_schema(
        tags=["Comments"],
        summary="Delete comment",
        parameters=[path_int("comment_id", "Comment ID")],
        responses={204: None, **std_errors()},
    )
    def delete(self, request, comment_id):
        comment = CommentSelector.get_comment_by_id(comment_id)

        if not comment:
            return not_found("Comment")

        CommentService.delete_comment(comment=comment, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
