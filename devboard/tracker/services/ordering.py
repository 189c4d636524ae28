# ============================================
# tracker/services/ordering.py
# ============================================
"""
Sparse integer ordering for the backlog and for board columns.

Positions are sort keys spaced ``POSITION_STEP`` apart. Moving an issue
only rewrites that issue: it gets the midpoint of its new neighbours, or
first - STEP / last + STEP at the ends. When two neighbours are adjacent
integers there is no midpoint left; the list is then renumbered
STEP, 2*STEP, ... in its current order and the midpoint is recomputed.

Every function that writes positions expects to run inside a transaction;
the row owning the list (workflow state for a column, project for the
backlog) and then the list rows are locked (SELECT ... FOR UPDATE) before
neighbours are read.
"""
import logging
from typing import List, Optional, Sequence

from tracker.conf import tracker_setting
from tracker.exceptions import Conflict, InvalidInput
from tracker.models import Issue
from tracker.repositories import issue_repository as repo
from tracker.repositories.issue_repository import BACKLOG, BOARD  # noqa: F401

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure position arithmetic
# ---------------------------------------------------------------------------

def midpoint(a: int, b: int) -> int:
    """(a + b) / 2 rounded half up."""
    return (a + b + 1) // 2


def compute_position(before: Optional[int], after: Optional[int], step: int) -> Optional[int]:
    """
    Position for a slot between ``before`` and ``after`` (either may be None).

    Returns None when there is no free integer strictly between the two
    neighbours, i.e. the list needs a rebalance first.
    """
    if before is None and after is None:
        return step
    if before is None:
        return after - step
    if after is None:
        return before + step
    if after - before < 2:
        return None
    return midpoint(before, after)


def rebalanced_positions(count: int, step: int) -> List[int]:
    return [step * (i + 1) for i in range(count)]


# ---------------------------------------------------------------------------
# List operations
# ---------------------------------------------------------------------------

def _get(issue: Issue, field: str) -> Optional[int]:
    return getattr(issue, field)


def _scope(issue: Issue, kind: str) -> dict:
    scope = {'project_id': issue.project_id}
    if kind == BOARD:
        scope['workflow_state_id'] = issue.workflow_state_id
    return scope


def _load_list(issue: Issue, kind: str, step: int) -> List[Issue]:
    """
    Lock the list the issue belongs to (its owner row, then its members
    without the issue itself) and give positions to unpositioned members,
    in creation order after the last positioned one.
    """
    field = repo.position_field(kind)
    repo.lock_scope(kind, **_scope(issue, kind))
    others = repo.locked_list(kind, exclude_id=issue.id, **_scope(issue, kind))

    positioned = [_get(o, field) for o in others if _get(o, field) is not None]
    last = max(positioned) if positioned else 0
    initialised = []
    for other in others:
        if _get(other, field) is None:
            last += step
            setattr(other, field, last)
            initialised.append(other)
    if initialised:
        repo.save_positions(initialised, kind)
        logger.info(
            "[ordering] initialised %s %s positions in project=%s",
            len(initialised), kind, issue.project_id
        )
    return others


def _rebalance(others: Sequence[Issue], kind: str, step: int) -> None:
    field = repo.position_field(kind)
    for other, pos in zip(others, rebalanced_positions(len(others), step)):
        setattr(other, field, pos)
    repo.save_positions(others, kind)
    logger.info(
        "[ordering] rebalanced %s %s positions (step=%s)", len(others), kind, step
    )


def _place(issue: Issue, kind: str, others: List[Issue], index: int, step: int) -> int:
    """
    Put ``issue`` at ``index`` of ``others`` (0 = top, len = bottom) and
    return its new position. Does not save ``issue``.
    """
    field = repo.position_field(kind)
    before = others[index - 1] if index > 0 else None
    after = others[index] if index < len(others) else None

    position = compute_position(
        _get(before, field) if before else None,
        _get(after, field) if after else None,
        step,
    )
    if position is None or not repo.POSITION_MIN <= position <= repo.POSITION_MAX:
        _rebalance(others, kind, step)
        position = compute_position(
            _get(before, field) if before else None,
            _get(after, field) if after else None,
            step,
        )
    setattr(issue, field, position)
    return position


def _index_of(others: Sequence[Issue], issue_id: int) -> int:
    for i, other in enumerate(others):
        if other.id == issue_id:
            return i
    raise InvalidInput(f"Issue {issue_id} is not in the same list")


def move_between(
    issue: Issue,
    kind: str,
    *,
    before_id: Optional[int] = None,
    after_id: Optional[int] = None,
) -> int:
    """
    Move ``issue`` so that it sits right after ``before_id`` and right
    before ``after_id``. With only one neighbour the other side is taken
    from the current list; with none the issue goes to the bottom.

    Raises Conflict when both neighbours are given but are no longer
    adjacent (the caller's view of the list is stale).
    """
    step = tracker_setting('POSITION_STEP')
    field = repo.position_field(kind)
    if issue.id in (before_id, after_id):
        raise InvalidInput("An issue cannot be its own neighbour")

    others = _load_list(issue, kind, step)

    if before_id is not None and after_id is not None:
        index = _index_of(others, before_id) + 1
        if index >= len(others) or others[index].id != after_id:
            raise Conflict("The list changed since it was loaded, reload and retry")
    elif before_id is not None:
        index = _index_of(others, before_id) + 1
    elif after_id is not None:
        index = _index_of(others, after_id)
    else:
        index = len(others)

    position = _place(issue, kind, others, index, step)
    issue.save(update_fields=[field, 'updated_at'])
    logger.info(
        "[ordering] %s moved in %s to %s (before=%s after=%s)",
        issue.key, kind, position, before_id, after_id
    )
    return position


def place_at(issue: Issue, kind: str, position: int) -> int:
    """
    Apply a client-computed position. If another issue of the list already
    holds it, the issue is inserted right before that one instead, so
    positions stay unique within the list.
    """
    step = tracker_setting('POSITION_STEP')
    field = repo.position_field(kind)
    others = _load_list(issue, kind, step)

    holder = next((o for o in others if _get(o, field) == position), None)
    if holder is None:
        setattr(issue, field, position)
    else:
        position = _place(issue, kind, others, others.index(holder), step)
    return position


def append(issue: Issue, kind: str) -> int:
    """Put the issue at the bottom of its list. Does not save ``issue``."""
    step = tracker_setting('POSITION_STEP')
    others = _load_list(issue, kind, step)
    return _place(issue, kind, others, len(others), step)
