import pytest
from unittest.mock import patch

from django.db import OperationalError

from tracker.exceptions import Conflict, NotFound
from tracker.models import Issue, IssueHistory
from tracker.services import numbering
from tracker.services.issue import IssueService
from tracker.services.project import ProjectService


@pytest.mark.django_db
def test_numbers_are_sequential_per_project(make_issue):
    issues = [make_issue(title=f"T{i}") for i in range(5)]

    assert [i.number for i in issues] == [1, 2, 3, 4, 5]
    assert [i.key for i in issues] == ["DEV-1", "DEV-2", "DEV-3", "DEV-4", "DEV-5"]
    for issue in issues:
        assert issue.key == f"{issue.project.key}-{issue.number}"


@pytest.mark.django_db
def test_two_issues_on_empty_project(owner):
    ops = ProjectService.create_project(name="Operations", key="OPS", owner=owner)
    task = ops.issue_types.get(name="Task")

    first = IssueService.create_issue(project_id=ops.id, user=owner, title="a", issue_type_id=task.id)
    second = IssueService.create_issue(project_id=ops.id, user=owner, title="b", issue_type_id=task.id)

    assert (first.key, second.key) == ("OPS-1", "OPS-2")


@pytest.mark.django_db
def test_numbering_is_independent_between_projects(owner, make_issue):
    make_issue()
    make_issue()
    ops = ProjectService.create_project(name="Operations", key="OPS", owner=owner)
    bug = ops.issue_types.get(name="Bug")

    issue = IssueService.create_issue(project_id=ops.id, user=owner, title="x", issue_type_id=bug.id)
    assert issue.number == 1


@pytest.mark.django_db
def test_taken_number_is_retried(make_issue):
    make_issue(title="first")

    # a concurrent writer grabbed number 1 between our read and our insert
    with patch("tracker.services.numbering.next_issue_number", side_effect=[1, 2]):
        issue = make_issue(title="second")

    assert issue.number == 2
    assert issue.key == "DEV-2"
    assert Issue.objects.count() == 2
    assert IssueHistory.objects.filter(field_name="created").count() == 2


@pytest.mark.django_db
def test_retries_exhausted_raise_conflict(project, make_issue):
    make_issue(title="first")

    with patch("tracker.services.numbering.next_issue_number", return_value=1):
        with pytest.raises(Conflict):
            make_issue(title="second")

    assert Issue.objects.filter(project=project).count() == 1


@pytest.mark.django_db
def test_unknown_project_is_not_found():
    with pytest.raises(NotFound):
        numbering.allocate_and_create(999999, lambda project, number, key: None)


def test_format_issue_key():
    assert numbering.format_issue_key("OPS", 12) == "OPS-12"


@pytest.mark.django_db
def test_lock_conflict_is_retried(settings, project, make_issue):
    settings.TRACKER = {"RETRY_BACKOFF_SECONDS": 0}

    with patch("tracker.services.numbering.next_issue_number",
               side_effect=[OperationalError("database is locked"), 1]):
        issue = make_issue(title="first")

    assert issue.key == "DEV-1"
    assert Issue.objects.filter(project=project).count() == 1


@pytest.mark.django_db
def test_lock_conflict_on_every_attempt_is_a_conflict(settings, project, make_issue):
    settings.TRACKER = {"RETRY_BACKOFF_SECONDS": 0, "ISSUE_KEY_MAX_RETRIES": 3}

    with patch("tracker.services.numbering.next_issue_number",
               side_effect=OperationalError("database is locked")) as next_number:
        with pytest.raises(Conflict):
            make_issue(title="first")

    assert next_number.call_count == 3
    assert not Issue.objects.filter(project=project).exists()
