import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from tracker.models import ProjectMember
from tracker.services.issue import IssueService
from tracker.services.project import ProjectService

User = get_user_model()


@pytest.fixture
def owner(db):
    return User.objects.create_user(username="alice", email="alice@example.com", password="pass12345")

@pytest.fixture
def member(db):
    return User.objects.create_user(username="bob", email="bob@example.com", password="pass12345")

@pytest.fixture
def viewer(db):
    return User.objects.create_user(username="carol", email="carol@example.com", password="pass12345")

@pytest.fixture
def outsider(db):
    return User.objects.create_user(username="dave", email="dave@example.com", password="pass12345")

@pytest.fixture
def project(owner, member, viewer):
    # DEV with alice as owner, bob as member and carol as viewer
    p = ProjectService.create_project(name="Dev Board", key="DEV", owner=owner)
    ProjectMember.objects.create(project=p, user=member, role=ProjectMember.Role.MEMBER)
    ProjectMember.objects.create(project=p, user=viewer, role=ProjectMember.Role.VIEWER)
    return p

@pytest.fixture
def states(project):
    return {s.name: s for s in project.workflow_states.all()}

@pytest.fixture
def story_type(project):
    return project.issue_types.get(name="Story")

@pytest.fixture
def make_issue(project, owner, story_type):
    def _make(title="Issue", user=None, **kwargs):
        return IssueService.create_issue(
            project_id=project.id,
            user=user or owner,
            title=title,
            issue_type_id=story_type.id,
            **kwargs
        )
    return _make

@pytest.fixture
def three_issues(make_issue):
    """DEV-1, DEV-2, DEV-3 at 1000 / 2000 / 3000 in backlog and Backlog column"""
    return [make_issue(title=f"Issue {i}") for i in (1, 2, 3)]

@pytest.fixture
def api_client():
    return APIClient()

@pytest.fixture
def owner_client(api_client, owner):
    api_client.force_authenticate(user=owner)
    return api_client
