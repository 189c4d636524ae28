import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from tracker.models import ProjectInvitation, ProjectMember
from tracker.services.project import ProjectService

User = get_user_model()


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_invite_and_accept_flow(owner_client, project):
    erin = User.objects.create_user(username="erin", email="erin@example.com", password="pass12345")

    resp = owner_client.post(
        f"/api/projects/{project.id}/members/invite/",
        {"email": "erin@example.com", "role": "MEMBER"},
        format="json",
    )
    assert resp.status_code == 201, resp.content

    pending = owner_client.get(f"/api/projects/{project.id}/invitations/").json()
    assert [p["email"] for p in pending] == ["erin@example.com"]

    token = ProjectInvitation.objects.get(email="erin@example.com").token
    resp = client_for(erin).post("/api/invitations/accept/", {"token": token}, format="json")
    assert resp.status_code == 200, resp.content
    assert resp.json()["role"] == "MEMBER"

    members = owner_client.get(f"/api/projects/{project.id}/members/").json()
    assert "erin" in [m["user"]["username"] for m in members]


@pytest.mark.django_db
def test_invalid_token(member):
    resp = client_for(member).post("/api/invitations/accept/", {"token": "nope"}, format="json")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_cancel_invitation(owner_client, project, member):
    resp = owner_client.post(f"/api/projects/{project.id}/members/invite/", {"email": "z@example.com"}, format="json")
    invitation_id = resp.json()["id"]

    assert client_for(member).delete(f"/api/invitations/{invitation_id}/").status_code == 403
    assert owner_client.delete(f"/api/invitations/{invitation_id}/").status_code == 204
    assert owner_client.delete("/api/invitations/999999/").status_code == 404
    assert ProjectInvitation.objects.get(id=invitation_id).status == "CANCELLED"


@pytest.mark.django_db
def test_change_role_and_remove(owner_client, project, member):
    bob = ProjectMember.objects.get(project=project, user=member)

    resp = owner_client.put(f"/api/projects/{project.id}/members/{bob.id}/role/", {"role": "VIEWER"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["role"] == "VIEWER"

    assert owner_client.delete(f"/api/projects/{project.id}/members/{bob.id}/").status_code == 204
    assert not ProjectMember.objects.filter(id=bob.id).exists()


@pytest.mark.django_db
def test_member_of_other_project_rejected(owner_client, owner, project):
    other = ProjectService.create_project(name="Ops", key="OPS", owner=owner)
    foreign = ProjectMember.objects.get(project=other, user=owner)

    resp = owner_client.delete(f"/api/projects/{project.id}/members/{foreign.id}/")
    assert resp.status_code == 400
