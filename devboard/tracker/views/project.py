# ============================================
# tracker/views/project.py
# ============================================
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.selectors.issue import IssueSelector
from tracker.selectors.project import ProjectSelector
from tracker.serializers.issue import (
    BoardColumnSerializer,
    IssueCreateSerializer,
    IssueListOutputSerializer,
    IssueOutputSerializer,
)
from tracker.serializers.project import (
    IssueTypeOutputSerializer,
    LabelCreateSerializer,
    LabelOutputSerializer,
    ProjectCreateSerializer,
    ProjectOutputSerializer,
    ProjectUpdateSerializer,
    WorkflowStateOutputSerializer,
)
from tracker.services import access
from tracker.services.issue import IssueService
from tracker.services.project import ProjectService
from tracker.utils.pagination import IssuePagination
from tracker.views.utils import (
    CONFLICT, extend_schema, not_found, path_int, q_bool, q_int, q_str,
    responses_ok, std_errors,
)

PROJECT_ID = path_int("project_id", "Project ID")


def _project_or_none(project_id):
    return ProjectSelector.get_project_by_id(project_id)


class ProjectListCreateAPIView(APIView):
    """
    GET: Projects the current user owns or belongs to
    POST: Create a project (caller becomes owner)
    """

    @extend_schema(
        tags=["Projects"],
        summary="List my projects",
        parameters=[q_bool("include_archived", "Include archived projects")],
        responses=responses_ok(ProjectOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request):
        include_archived = request.query_params.get("include_archived", "").lower() in ("1", "true", "yes")
        projects = ProjectSelector.get_projects_for_user(request.user.id, include_archived=include_archived)
        return Response(ProjectOutputSerializer(projects, many=True).data)

    @extend_schema(
        tags=["Projects"],
        summary="Create project",
        description="Creates the project with the default workflow states and issue types.",
        request=ProjectCreateSerializer,
        responses=responses_ok(ProjectOutputSerializer, code=201, extra=std_errors()),
    )
    def post(self, request):
        serializer = ProjectCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = ProjectService.create_project(owner=request.user, **serializer.validated_data)
        return Response(ProjectOutputSerializer(project).data, status=status.HTTP_201_CREATED)


class ProjectDetailAPIView(APIView):
    """
    GET: Project details
    PUT: Update name/description (owner only)
    """

    @extend_schema(
        tags=["Projects"],
        summary="Get project",
        parameters=[PROJECT_ID],
        responses=responses_ok(ProjectOutputSerializer, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)
        return Response(ProjectOutputSerializer(project).data)

    @extend_schema(
        tags=["Projects"],
        summary="Update project",
        parameters=[PROJECT_ID],
        request=ProjectUpdateSerializer,
        responses=responses_ok(ProjectOutputSerializer, extra=std_errors()),
    )
    def put(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")

        serializer = ProjectUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = ProjectService.update_project(project=project, user=request.user, **serializer.validated_data)
        return Response(ProjectOutputSerializer(project).data)


class ProjectArchiveAPIView(APIView):

    @extend_schema(
        tags=["Projects"],
        summary="Archive project",
        parameters=[PROJECT_ID],
        request=None,
        responses=responses_ok(ProjectOutputSerializer, extra=std_errors()),
    )
    def post(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        project = ProjectService.archive_project(project=project, user=request.user)
        return Response(ProjectOutputSerializer(project).data)


class ProjectRestoreAPIView(APIView):

    @extend_schema(
        tags=["Projects"],
        summary="Restore archived project",
        parameters=[PROJECT_ID],
        request=None,
        responses=responses_ok(ProjectOutputSerializer, extra=std_errors()),
    )
    def post(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        project = ProjectService.restore_project(project=project, user=request.user)
        return Response(ProjectOutputSerializer(project).data)


class LabelListCreateAPIView(APIView):

    @extend_schema(
        tags=["Projects"],
        summary="List labels",
        parameters=[PROJECT_ID],
        responses=responses_ok(LabelOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)
        return Response(LabelOutputSerializer(ProjectSelector.get_labels(project.id), many=True).data)

    @extend_schema(
        tags=["Projects"],
        summary="Create label",
        parameters=[PROJECT_ID],
        request=LabelCreateSerializer,
        responses=responses_ok(LabelOutputSerializer, code=201, extra=std_errors()),
    )
    def post(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")

        serializer = LabelCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        label = ProjectService.create_label(project=project, user=request.user, **serializer.validated_data)
        return Response(LabelOutputSerializer(label).data, status=status.HTTP_201_CREATED)


class WorkflowStateListAPIView(APIView):

    @extend_schema(
        tags=["Workflow"],
        summary="List workflow states in display order",
        parameters=[PROJECT_ID],
        responses=responses_ok(WorkflowStateOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)
        states = ProjectSelector.get_workflow_states(project.id)
        return Response(WorkflowStateOutputSerializer(states, many=True).data)


class IssueTypeListAPIView(APIView):

    @extend_schema(
        tags=["Projects"],
        summary="List issue types",
        parameters=[PROJECT_ID],
        responses=responses_ok(IssueTypeOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)
        return Response(IssueTypeOutputSerializer(ProjectSelector.get_issue_types(project.id), many=True).data)


class ProjectIssueListCreateAPIView(APIView):
    """
    GET: List issues of the project with filters
    POST: Create an issue; the response carries its key and number

    Query params (GET):
    - workflow_state_id: int (optional)
    - assignee_id: int (optional)
    - priority: string (optional)
    - search: string (optional)
    - page: int
    - page_size: int
    """

    @extend_schema(
        tags=["Issues"],
        summary="List project issues",
        parameters=[
            PROJECT_ID,
            q_int("workflow_state_id", "Filter by workflow state"),
            q_int("assignee_id", "Filter by assignee"),
            q_str("priority", "LOW | MEDIUM | HIGH | CRITICAL"),
            q_str("search", "Text in title, description or key"),
            q_int("page", "Page (default 1)"),
            q_int("page_size", "Page size (default 50, max 200)"),
        ],
        responses=responses_ok(IssueListOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)

        filters = {
            'workflow_state_id': request.query_params.get('workflow_state_id'),
            'assignee_id': request.query_params.get('assignee_id'),
            'priority': request.query_params.get('priority'),
            'search': request.query_params.get('search'),
        }

        # Remove None values
        filters = {k: v for k, v in filters.items() if v is not None}

        issues = IssueSelector.get_issues_list(project.id, **filters)

        paginator = IssuePagination()
        page = paginator.paginate_queryset(issues, request)
        serializer = IssueListOutputSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @extend_schema(
        tags=["Issues"],
        summary="Create issue",
        description="Allocates the next PROJECT-N key and appends the issue to the backlog and its column.",
        parameters=[PROJECT_ID],
        request=IssueCreateSerializer,
        responses=responses_ok(IssueOutputSerializer, code=201, extra=std_errors(CONFLICT)),
    )
    def post(self, request, project_id):
        serializer = IssueCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        issue = IssueService.create_issue(
            project_id=project_id,
            user=request.user,
            **serializer.validated_data
        )
        issue = IssueSelector.get_issue_by_id(issue.id)
        return Response(IssueOutputSerializer(issue).data, status=status.HTTP_201_CREATED)


class BacklogAPIView(APIView):

    @extend_schema(
        tags=["Issues"],
        summary="Backlog in priority order",
        parameters=[PROJECT_ID],
        responses=responses_ok(IssueListOutputSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)
        issues = IssueSelector.get_backlog(project.id)
        return Response(IssueListOutputSerializer(issues, many=True).data)


class BoardAPIView(APIView):

    @extend_schema(
        tags=["Issues"],
        summary="Board: one column per workflow state",
        parameters=[PROJECT_ID],
        responses=responses_ok(BoardColumnSerializer, many=True, extra=std_errors()),
    )
    def get(self, request, project_id):
        project = _project_or_none(project_id)
        if not project:
            return not_found("Project")
        access.check_access(project, request.user)
        columns = IssueSelector.get_board(project.id)
        return Response(BoardColumnSerializer(columns, many=True).data)
