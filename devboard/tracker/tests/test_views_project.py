import pytest
from rest_framework.test import APIClient

from tracker.models import Project, ProjectMember


@pytest.mark.django_db
def test_requires_authentication(api_client):
    resp = api_client.get("/api/projects/")
    assert resp.status_code in (401, 403)


@pytest.mark.django_db
def test_create_project(owner_client, owner):
    resp = owner_client.post("/api/projects/", {"name": "Operations", "key": "OPS"}, format="json")

    assert resp.status_code == 201, resp.content
    body = resp.json()
    assert body["key"] == "OPS"
    assert body["owner"]["username"] == "alice"
    project = Project.objects.get(key="OPS")
    assert ProjectMember.objects.get(project=project, user=owner).role == "OWNER"
    assert project.workflow_states.count() == 6
    assert project.issue_types.count() == 4


@pytest.mark.django_db
@pytest.mark.parametrize("key", ["ops", "O", "OPERATIONS1", "OP-S"])
def test_create_project_rejects_bad_key(owner_client, key):
    resp = owner_client.post("/api/projects/", {"name": "x", "key": key}, format="json")
    assert resp.status_code == 400


@pytest.mark.django_db
def test_duplicate_project_key(owner_client, project):
    resp = owner_client.post("/api/projects/", {"name": "Again", "key": "DEV"}, format="json")

    assert resp.status_code == 400
    assert "already exists" in resp.json()["detail"]


@pytest.mark.django_db
def test_list_only_my_projects(project, outsider):
    client = APIClient()
    client.force_authenticate(user=outsider)

    assert client.get("/api/projects/").json() == []


@pytest.mark.django_db
def test_project_detail_access(owner_client, project, outsider):
    assert owner_client.get(f"/api/projects/{project.id}/").status_code == 200
    assert owner_client.get("/api/projects/999999/").status_code == 404

    client = APIClient()
    client.force_authenticate(user=outsider)
    assert client.get(f"/api/projects/{project.id}/").status_code == 403


@pytest.mark.django_db
def test_update_is_owner_only(owner_client, project, member):
    resp = owner_client.put(f"/api/projects/{project.id}/", {"name": "Renamed"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"

    client = APIClient()
    client.force_authenticate(user=member)
    resp = client.put(f"/api/projects/{project.id}/", {"name": "Mine"}, format="json")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_archive_and_restore(owner_client, project):
    resp = owner_client.post(f"/api/projects/{project.id}/archive/")
    assert resp.status_code == 200
    assert resp.json()["archived"] is True
    assert owner_client.get("/api/projects/").json() == []
    assert len(owner_client.get("/api/projects/?include_archived=true").json()) == 1

    resp = owner_client.post(f"/api/projects/{project.id}/restore/")
    assert resp.json()["archived"] is False


@pytest.mark.django_db
def test_labels(owner_client, project):
    resp = owner_client.post(f"/api/projects/{project.id}/labels/", {"name": "ui", "color": "#FF0000"}, format="json")
    assert resp.status_code == 201

    dup = owner_client.post(f"/api/projects/{project.id}/labels/", {"name": "ui"}, format="json")
    assert dup.status_code == 400

    labels = owner_client.get(f"/api/projects/{project.id}/labels/").json()
    assert [(l["name"], l["color"]) for l in labels] == [("ui", "#FF0000")]


@pytest.mark.django_db
def test_workflow_states_and_issue_types(owner_client, project):
    states = owner_client.get(f"/api/projects/{project.id}/workflow-states/").json()
    assert [s["name"] for s in states][0] == "Backlog"
    assert states[-1]["terminal"] is True

    types = owner_client.get(f"/api/projects/{project.id}/issue-types/").json()
    assert [t["name"] for t in types] == ["Story", "Bug", "Task", "Epic"]


@pytest.mark.django_db
def test_set_transitions_endpoint(owner_client, states):
    resp = owner_client.put(
        f"/api/workflow-states/{states['Backlog'].id}/transitions/",
        {"allowed_transitions": [states["To Do"].id]},
        format="json",
    )

    assert resp.status_code == 200
    assert resp.json()["allowed_transitions"] == [states["To Do"].id]

    missing = owner_client.put("/api/workflow-states/999999/transitions/", {"allowed_transitions": []}, format="json")
    assert missing.status_code == 404


@pytest.mark.django_db
def test_schema_is_served(owner_client):
    resp = owner_client.get("/api/schema/")
    assert resp.status_code == 200
