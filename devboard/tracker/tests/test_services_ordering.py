import pytest
from unittest.mock import patch

from django.db import OperationalError

from tracker.exceptions import Conflict, InvalidInput
from tracker.models import Issue
from tracker.selectors.issue import IssueSelector
from tracker.repositories import issue_repository as repo
from tracker.services import ordering
from tracker.services.issue import IssueService


# ---- pure position arithmetic

def test_between_takes_midpoint():
    assert ordering.compute_position(1000, 2000, 1000) == 1500
    assert ordering.compute_position(1000, 1500, 1000) == 1250

def test_midpoint_rounds_half_up():
    assert ordering.midpoint(1000, 1003) == 1002
    assert ordering.midpoint(-3, 0) == -1

def test_ends_and_empty_list():
    assert ordering.compute_position(None, None, 1000) == 1000
    assert ordering.compute_position(None, 1000, 1000) == 0
    assert ordering.compute_position(3000, None, 1000) == 4000

def test_collapsed_gap_needs_rebalance():
    assert ordering.compute_position(1000, 1001, 1000) is None
    assert ordering.compute_position(1000, 1000, 1000) is None

def test_rebalanced_positions():
    assert ordering.rebalanced_positions(3, 1000) == [1000, 2000, 3000]
    assert ordering.rebalanced_positions(0, 1000) == []


# ---- lists in the database

def backlog_keys(project):
    return [i.key for i in IssueSelector.get_backlog(project.id)]

def positions(issues, field="backlog_position"):
    return [getattr(Issue.objects.get(id=i.id), field) for i in issues]


@pytest.mark.django_db
def test_new_issues_are_appended(project, three_issues):
    assert positions(three_issues) == [1000, 2000, 3000]
    assert positions(three_issues, "board_position") == [1000, 2000, 3000]


@pytest.mark.django_db
def test_move_between_neighbours(project, owner, three_issues):
    i1, i2, i3 = three_issues

    IssueService.move_issue(issue_id=i3.id, user=owner, list_kind="backlog", before_id=i1.id, after_id=i2.id)

    assert Issue.objects.get(id=i3.id).backlog_position == 1500
    assert backlog_keys(project) == ["DEV-1", "DEV-3", "DEV-2"]
    # only the moved issue was rewritten
    assert positions([i1, i2]) == [1000, 2000]


@pytest.mark.django_db
def test_move_to_top_and_bottom(project, owner, three_issues):
    i1, i2, i3 = three_issues

    IssueService.move_issue(issue_id=i3.id, user=owner, list_kind="backlog", after_id=i1.id)
    assert Issue.objects.get(id=i3.id).backlog_position == 0

    IssueService.move_issue(issue_id=i1.id, user=owner, list_kind="backlog", before_id=i2.id)
    assert Issue.objects.get(id=i1.id).backlog_position == 3000
    assert backlog_keys(project) == ["DEV-3", "DEV-2", "DEV-1"]


@pytest.mark.django_db
def test_move_without_neighbours_goes_to_bottom(project, owner, three_issues):
    i1, _, _ = three_issues

    IssueService.move_issue(issue_id=i1.id, user=owner, list_kind="backlog")

    assert backlog_keys(project) == ["DEV-2", "DEV-3", "DEV-1"]


@pytest.mark.django_db
def test_collapsed_gap_rebalances_and_keeps_order(project, owner, three_issues):
    i1, i2, i3 = three_issues
    Issue.objects.filter(id=i2.id).update(backlog_position=1001)

    IssueService.move_issue(issue_id=i3.id, user=owner, list_kind="backlog", before_id=i1.id, after_id=i2.id)

    assert backlog_keys(project) == ["DEV-1", "DEV-3", "DEV-2"]
    assert positions([i1, i2, i3]) == [1000, 2000, 1500]


@pytest.mark.django_db
def test_unpositioned_issues_are_initialised_in_creation_order(project, owner, three_issues):
    i1, i2, i3 = three_issues
    Issue.objects.filter(project=project).update(backlog_position=None)

    IssueService.move_issue(issue_id=i1.id, user=owner, list_kind="backlog")

    assert positions([i2, i3, i1]) == [1000, 2000, 3000]


@pytest.mark.django_db
def test_stale_neighbours_are_a_conflict(project, owner, three_issues):
    i1, i2, i3 = three_issues

    # the client still thinks DEV-2 sits right above DEV-1
    with pytest.raises(Conflict):
        IssueService.move_issue(issue_id=i3.id, user=owner, list_kind="backlog", before_id=i2.id, after_id=i1.id)

    assert backlog_keys(project) == ["DEV-1", "DEV-2", "DEV-3"]
    assert positions([i3]) == [3000]


@pytest.mark.django_db
def test_neighbour_from_another_column_is_rejected(project, owner, states, three_issues):
    i1, i2, _ = three_issues
    IssueService.update_issue(issue_id=i2.id, user=owner, workflow_state_id=states["To Do"].id)

    with pytest.raises(InvalidInput):
        IssueService.move_issue(issue_id=i1.id, user=owner, list_kind="board", before_id=i2.id)


@pytest.mark.django_db
def test_issue_cannot_be_its_own_neighbour(owner, three_issues):
    i1, _, _ = three_issues

    with pytest.raises(InvalidInput):
        IssueService.move_issue(issue_id=i1.id, user=owner, list_kind="backlog", before_id=i1.id)


@pytest.mark.django_db
def test_raw_position_on_taken_slot_inserts_before_holder(project, owner, three_issues):
    i1, i2, i3 = three_issues

    IssueService.update_issue(issue_id=i3.id, user=owner, backlog_position=2000)

    assert Issue.objects.get(id=i3.id).backlog_position == 1500
    assert backlog_keys(project) == ["DEV-1", "DEV-3", "DEV-2"]


@pytest.mark.django_db
def test_raw_position_on_free_slot_is_applied(project, owner, three_issues):
    i1, _, _ = three_issues

    IssueService.update_issue(issue_id=i1.id, user=owner, backlog_position=5000)

    assert Issue.objects.get(id=i1.id).backlog_position == 5000
    assert backlog_keys(project) == ["DEV-2", "DEV-3", "DEV-1"]


@pytest.mark.django_db
def test_board_column_order_is_per_state(project, owner, states, three_issues):
    i1, i2, i3 = three_issues
    todo = states["To Do"]

    IssueService.update_issue(issue_id=i3.id, user=owner, workflow_state_id=todo.id)
    IssueService.update_issue(issue_id=i1.id, user=owner, workflow_state_id=todo.id)

    columns = {c["name"]: [i.key for i in c["issues"]] for c in IssueSelector.get_board(project.id)}
    assert columns["Backlog"] == ["DEV-2"]
    assert columns["To Do"] == ["DEV-3", "DEV-1"]
    assert positions([i3, i1], "board_position") == [1000, 2000]


@pytest.mark.django_db
def test_position_past_column_range_rebalances(project, owner, three_issues):
    i1, i2, i3 = three_issues
    Issue.objects.filter(id=i1.id).update(backlog_position=repo.POSITION_MAX)

    IssueService.move_issue(issue_id=i2.id, user=owner, list_kind="backlog")

    assert backlog_keys(project) == ["DEV-3", "DEV-1", "DEV-2"]
    assert positions([i3, i1, i2]) == [1000, 2000, 3000]


# ---- locking and retries

@pytest.mark.django_db
def test_column_owner_row_is_locked_before_the_list(project, owner, states, three_issues):
    i1, _, _ = three_issues
    done = states["Done"]

    with patch.object(repo, "lock_scope", wraps=repo.lock_scope) as lock_scope:
        IssueService.update_issue(issue_id=i1.id, user=owner, workflow_state_id=done.id)

    lock_scope.assert_called_with(repo.BOARD, project_id=project.id, workflow_state_id=done.id)
    assert Issue.objects.get(id=i1.id).board_position == 1000


@pytest.mark.django_db
def test_backlog_owner_row_is_locked(project, owner, three_issues):
    i1, i2, _ = three_issues

    with patch.object(repo, "lock_scope", wraps=repo.lock_scope) as lock_scope:
        IssueService.move_issue(issue_id=i1.id, user=owner, list_kind="backlog", before_id=i2.id)

    lock_scope.assert_called_once_with(repo.BACKLOG, project_id=project.id)


@pytest.mark.django_db
def test_lock_conflicts_are_retried(settings, project, owner, three_issues):
    settings.TRACKER = {"RETRY_BACKOFF_SECONDS": 0}
    i1, i2, i3 = three_issues
    real_move = ordering.move_between
    attempts = []

    def locked_twice(*args, **kwargs):
        attempts.append(1)
        if len(attempts) <= 2:
            raise OperationalError("database is locked")
        return real_move(*args, **kwargs)

    with patch("tracker.services.ordering.move_between", side_effect=locked_twice):
        IssueService.move_issue(issue_id=i3.id, user=owner, list_kind="backlog", before_id=i1.id, after_id=i2.id)

    assert len(attempts) == 3
    assert Issue.objects.get(id=i3.id).backlog_position == 1500
    assert backlog_keys(project) == ["DEV-1", "DEV-3", "DEV-2"]


@pytest.mark.django_db
def test_retries_exhausted_raise_conflict(settings, project, owner, three_issues):
    settings.TRACKER = {"RETRY_BACKOFF_SECONDS": 0, "POSITION_MAX_RETRIES": 3}
    i1, i2, i3 = three_issues

    with patch("tracker.services.ordering.move_between",
               side_effect=OperationalError("database is locked")) as move:
        with pytest.raises(Conflict):
            IssueService.move_issue(issue_id=i3.id, user=owner, list_kind="backlog", before_id=i1.id)

    assert move.call_count == 3
    assert positions([i1, i2, i3]) == [1000, 2000, 3000]
