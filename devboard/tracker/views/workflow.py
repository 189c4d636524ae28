# ============================================
# tracker/views/workflow.py
# ============================================
from rest_framework.response import Response
from rest_framework.views import APIView

from tracker.serializers.project import WorkflowStateOutputSerializer, WorkflowTransitionsSerializer
from tracker.services import workflow
from tracker.views.utils import extend_schema, path_int, responses_ok, std_errors


class WorkflowTransitionsAPIView(APIView):
    """
    PUT: Replace the allowed target states of a workflow state (owner only).
    An empty list allows every state of the project.
    """

    @extend_schema(
        tags=["Workflow"],
        summary="Set allowed transitions",
        parameters=[path_int("state_id", "Workflow state ID")],
        request=WorkflowTransitionsSerializer,
        responses=responses_ok(WorkflowStateOutputSerializer, extra=std_errors()),
    )
    def put(self, request, state_id):
        serializer = WorkflowTransitionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        state = workflow.set_allowed_transitions(
            state_id=state_id,
            target_ids=serializer.validated_data['allowed_transitions'],
            user=request.user,
        )
        return Response(WorkflowStateOutputSerializer(state).data)
