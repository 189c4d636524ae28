import pytest
from django.core.exceptions import PermissionDenied, ValidationError

from tracker.exceptions import InvalidTransition
from tracker.models import Issue, IssueHistory, WorkflowState
from tracker.models.workflow import format_transition_ids, parse_transition_ids
from tracker.services import workflow
from tracker.services.issue import IssueService
from tracker.services.project import ProjectService


def test_transition_ids_round_trip_through_storage():
    assert parse_transition_ids("") == frozenset()
    assert parse_transition_ids("3, 1,2,") == frozenset({1, 2, 3})
    assert format_transition_ids({3, 1, 2}) == "1,2,3"


@pytest.mark.django_db
def test_new_project_gets_default_workflow(project):
    states = list(WorkflowState.objects.filter(project=project).order_by("order"))

    assert [s.name for s in states] == ["Backlog", "To Do", "In Progress", "Review", "Testing", "Done"]
    assert [s.terminal for s in states] == [False] * 5 + [True]
    assert all(s.allowed_transition_ids == frozenset() for s in states)


@pytest.mark.django_db
def test_allowed_target_is_accepted_with_history(owner, states, make_issue):
    workflow.set_allowed_transitions(state_id=states["Backlog"].id, target_ids=[states["To Do"].id], user=owner)
    issue = make_issue()

    IssueService.update_issue(issue_id=issue.id, user=owner, workflow_state_id=states["To Do"].id)

    issue.refresh_from_db()
    assert issue.workflow_state_id == states["To Do"].id
    entry = IssueHistory.objects.get(issue=issue, field_name="status")
    assert (entry.old_value, entry.new_value) == ("Backlog", "To Do")
    assert entry.changed_by == owner


@pytest.mark.django_db
def test_target_outside_allow_list_is_rejected_without_mutation(owner, states, make_issue):
    workflow.set_allowed_transitions(state_id=states["Backlog"].id, target_ids=[states["To Do"].id], user=owner)
    issue = make_issue()

    with pytest.raises(InvalidTransition) as exc:
        IssueService.update_issue(
            issue_id=issue.id, user=owner, workflow_state_id=states["Done"].id, title="changed too"
        )

    assert "'Backlog' to 'Done'" in str(exc.value.detail)
    issue.refresh_from_db()
    assert issue.workflow_state_id == states["Backlog"].id
    assert issue.title == "Issue"
    assert not IssueHistory.objects.filter(issue=issue).exclude(field_name="created").exists()


@pytest.mark.django_db
def test_empty_allow_list_allows_any_state(owner, states, make_issue):
    issue = make_issue()

    IssueService.update_issue(issue_id=issue.id, user=owner, workflow_state_id=states["Done"].id)

    assert Issue.objects.get(id=issue.id).workflow_state_id == states["Done"].id


@pytest.mark.django_db
def test_state_of_another_project_is_rejected(owner, states, make_issue):
    other = ProjectService.create_project(name="Ops", key="OPS", owner=owner)
    foreign = other.workflow_states.get(name="Done")
    issue = make_issue()

    with pytest.raises(ValidationError):
        IssueService.update_issue(issue_id=issue.id, user=owner, workflow_state_id=foreign.id)


@pytest.mark.django_db
def test_only_owner_configures_transitions(member, states):
    with pytest.raises(PermissionDenied):
        workflow.set_allowed_transitions(state_id=states["Backlog"].id, target_ids=[], user=member)


@pytest.mark.django_db
def test_state_cannot_target_itself(owner, states):
    backlog = states["Backlog"]
    with pytest.raises(ValidationError):
        workflow.set_allowed_transitions(state_id=backlog.id, target_ids=[backlog.id], user=owner)


@pytest.mark.django_db
def test_targets_must_belong_to_same_project(owner, states):
    other = ProjectService.create_project(name="Ops", key="OPS", owner=owner)
    foreign = other.workflow_states.first()

    with pytest.raises(ValidationError):
        workflow.set_allowed_transitions(state_id=states["Backlog"].id, target_ids=[foreign.id], user=owner)


@pytest.mark.django_db
def test_allow_list_is_stored_comma_separated(owner, states):
    state = workflow.set_allowed_transitions(
        state_id=states["Testing"].id,
        target_ids=[states["Done"].id, states["In Progress"].id],
        user=owner,
    )

    state.refresh_from_db()
    assert state.allowed_transition_ids == frozenset({states["Done"].id, states["In Progress"].id})
    assert state.allowed_transitions == ",".join(str(i) for i in sorted(state.allowed_transition_ids))
    assert state.can_transition_to(states["Done"].id)
    assert not state.can_transition_to(states["Backlog"].id)
