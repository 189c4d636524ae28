# ============================================
# tracker/services/workflow.py
# ============================================
import logging
from typing import Iterable

from django.core.exceptions import ValidationError
from django.db import transaction

from tracker.exceptions import InvalidTransition, NotFound
from tracker.models import WorkflowState
from tracker.services import access

logger = logging.getLogger(__name__)


def validate_transition(current: WorkflowState, target: WorkflowState) -> None:
    """
    Accept or reject moving an issue from ``current`` to ``target``.
    An empty allow-list on ``current`` allows any state of the project.
    """
    if target.project_id != current.project_id:
        raise ValidationError("Workflow state does not belong to this project")
    if target.id == current.id:
        return
    if not current.can_transition_to(target.id):
        raise InvalidTransition(
            f"Invalid workflow transition from '{current.name}' to '{target.name}'"
        )


def resolve_target(state_id: int) -> WorkflowState:
    try:
        return WorkflowState.objects.get(id=state_id)
    except WorkflowState.DoesNotExist:
        raise NotFound(f"Workflow state not found: {state_id}")


@transaction.atomic
def set_allowed_transitions(*, state_id: int, target_ids: Iterable[int], user) -> WorkflowState:
    """Replace the allow-list of a state. Only the project owner may do this."""
    try:
        state = WorkflowState.objects.select_for_update().select_related('project').get(id=state_id)
    except WorkflowState.DoesNotExist:
        raise NotFound(f"Workflow state not found: {state_id}")

    access.check_owner(state.project, user, "configure workflow transitions")

    target_ids = set(target_ids)
    if state.id in target_ids:
        raise ValidationError("A workflow state cannot list itself as a transition target")
    known = set(
        WorkflowState.objects
        .filter(project_id=state.project_id, id__in=target_ids)
        .values_list('id', flat=True)
    )
    unknown = target_ids - known
    if unknown:
        raise ValidationError(
            f"Workflow states {sorted(unknown)} do not belong to this project"
        )

    state.allowed_transition_ids = target_ids
    state.save(update_fields=['allowed_transitions'])
    logger.info(
        "[workflow] state=%s transitions set to %s by user=%s",
        state.id, state.allowed_transitions or "(any)", user.id
    )
    return state
