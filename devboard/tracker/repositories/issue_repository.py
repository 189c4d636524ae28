# -*- coding: utf-8 -*-
"""
Repository layer for Issue (DB only).
Position lists: the backlog of a project, or one board column
(issues of a project in one workflow state).
"""
from __future__ import annotations
from typing import Iterable, List, Optional

from django.db.models import F, Max, QuerySet

from tracker.models import Issue, Project, WorkflowState

BOARD = "board"
BACKLOG = "backlog"

# range of the position columns (32-bit IntegerField)
POSITION_MIN = -(2 ** 31)
POSITION_MAX = 2 ** 31 - 1

POSITION_FIELDS = {
    BOARD: "board_position",
    BACKLOG: "backlog_position",
}


def position_field(kind: str) -> str:
    try:
        return POSITION_FIELDS[kind]
    except KeyError:
        raise ValueError(f"Unknown position list: {kind!r}")


# ============== Queries ==============
def get_by_id(issue_id: int, *, for_update: bool = False) -> Optional[Issue]:
    qs = Issue.objects.select_related("project", "workflow_state", "issue_type", "reporter", "assignee")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    return qs.filter(id=issue_id).first()


def max_number(project_id: int) -> int:
    return Issue.objects.filter(project_id=project_id).aggregate(m=Max("number"))["m"] or 0


def list_queryset(kind: str, *, project_id: int, workflow_state_id: Optional[int] = None) -> QuerySet[Issue]:
    """Issues of one list in display order: positioned first, then by creation."""
    field = position_field(kind)
    qs = Issue.objects.filter(project_id=project_id)
    if kind == BOARD:
        qs = qs.filter(workflow_state_id=workflow_state_id)
    return qs.order_by(F(field).asc(nulls_last=True), "created_at", "id")


def lock_scope(kind: str, *, project_id: int, workflow_state_id: Optional[int] = None) -> None:
    """
    Lock the row that owns a position list: the workflow state for a board
    column, the project for the backlog. Held until the transaction ends, so
    writers to one list queue here even while the list is empty.
    """
    position_field(kind)
    if kind == BOARD:
        qs = WorkflowState.objects.filter(id=workflow_state_id, project_id=project_id)
    else:
        qs = Project.objects.filter(id=project_id)
    list(qs.select_for_update().values_list("id", flat=True))


def locked_list(
    kind: str,
    *,
    project_id: int,
    workflow_state_id: Optional[int] = None,
    exclude_id: Optional[int] = None,
) -> List[Issue]:
    qs = list_queryset(kind, project_id=project_id, workflow_state_id=workflow_state_id)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return list(qs.select_for_update())


# ============== Mutations ==============
def save_positions(issues: Iterable[Issue], kind: str) -> int:
    issues = list(issues)
    if not issues:
        return 0
    return Issue.objects.bulk_update(issues, [position_field(kind)])
