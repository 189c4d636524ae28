import pytest
from rest_framework.test import APIClient

from tracker.models import Issue
from tracker.services import workflow


@pytest.mark.django_db
def test_create_issue_returns_key_and_number(owner_client, project, story_type):
    url = f"/api/projects/{project.id}/issues/"
    payload = {"title": "Set up CI", "issue_type_id": story_type.id, "priority": "HIGH"}

    first = owner_client.post(url, payload, format="json")
    second = owner_client.post(url, payload, format="json")

    assert first.status_code == 201, first.content
    assert (first.json()["key"], first.json()["number"]) == ("DEV-1", 1)
    assert (second.json()["key"], second.json()["number"]) == ("DEV-2", 2)
    assert second.json()["backlog_position"] == 2000


@pytest.mark.django_db
def test_create_issue_validation(owner_client, project, story_type):
    url = f"/api/projects/{project.id}/issues/"

    resp = owner_client.post(url, {"title": "x", "issue_type_id": story_type.id, "story_points": 0}, format="json")
    assert resp.status_code == 400
    resp = owner_client.post(url, {"title": "x", "issue_type_id": 999999}, format="json")
    assert resp.status_code == 400
    assert not Issue.objects.exists()


@pytest.mark.django_db
def test_create_issue_in_missing_project(owner_client, story_type):
    resp = owner_client.post("/api/projects/999999/issues/", {"title": "x", "issue_type_id": story_type.id}, format="json")
    assert resp.status_code == 404


@pytest.mark.django_db
def test_get_issue_by_id_and_key(owner_client, make_issue, outsider):
    issue = make_issue(title="Find me")

    assert owner_client.get(f"/api/issues/{issue.id}/").json()["title"] == "Find me"
    assert owner_client.get("/api/issues/key/dev-1/").json()["id"] == issue.id
    assert owner_client.get("/api/issues/999999/").status_code == 404

    client = APIClient()
    client.force_authenticate(user=outsider)
    assert client.get(f"/api/issues/{issue.id}/").status_code == 403


@pytest.mark.django_db
def test_put_rejects_transition_outside_allow_list(owner_client, owner, states, make_issue):
    workflow.set_allowed_transitions(state_id=states["Backlog"].id, target_ids=[states["To Do"].id], user=owner)
    issue = make_issue()

    resp = owner_client.put(f"/api/issues/{issue.id}/", {"workflow_state_id": states["Done"].id}, format="json")

    assert resp.status_code == 400
    assert "Invalid workflow transition" in resp.json()["detail"]
    assert Issue.objects.get(id=issue.id).workflow_state_id == states["Backlog"].id


@pytest.mark.django_db
def test_put_updates_fields_and_history(owner_client, states, make_issue):
    issue = make_issue()

    resp = owner_client.put(
        f"/api/issues/{issue.id}/",
        {"title": "Renamed", "workflow_state_id": states["In Progress"].id},
        format="json",
    )

    assert resp.status_code == 200, resp.content
    assert resp.json()["workflow_state_name"] == "In Progress"
    history = owner_client.get(f"/api/issues/{issue.id}/history/").json()
    assert {h["field_name"] for h in history} == {"created", "title", "status"}


@pytest.mark.django_db
def test_put_missing_issue(owner_client):
    assert owner_client.put("/api/issues/999999/", {"title": "x"}, format="json").status_code == 404


@pytest.mark.django_db
def test_move_endpoint(owner_client, project, three_issues):
    i1, i2, i3 = three_issues

    resp = owner_client.post(
        f"/api/issues/{i3.id}/move/",
        {"list": "backlog", "before_id": i1.id, "after_id": i2.id},
        format="json",
    )

    assert resp.status_code == 200, resp.content
    assert resp.json()["backlog_position"] == 1500
    backlog = owner_client.get(f"/api/projects/{project.id}/backlog/").json()
    assert [i["key"] for i in backlog] == ["DEV-1", "DEV-3", "DEV-2"]


@pytest.mark.django_db
def test_move_with_stale_neighbours_is_409(owner_client, three_issues):
    i1, i2, i3 = three_issues

    resp = owner_client.post(
        f"/api/issues/{i3.id}/move/",
        {"list": "backlog", "before_id": i2.id, "after_id": i1.id},
        format="json",
    )
    assert resp.status_code == 409


@pytest.mark.django_db
def test_board(owner_client, project, three_issues):
    columns = owner_client.get(f"/api/projects/{project.id}/board/").json()

    assert [c["name"] for c in columns] == ["Backlog", "To Do", "In Progress", "Review", "Testing", "Done"]
    assert columns[0]["issue_count"] == 3
    assert [i["key"] for i in columns[0]["issues"]] == ["DEV-1", "DEV-2", "DEV-3"]


@pytest.mark.django_db
def test_issue_list_filters_and_paginates(owner_client, project, member, make_issue):
    make_issue(title="alpha")
    make_issue(title="beta", assignee_id=member.id)

    resp = owner_client.get(f"/api/projects/{project.id}/issues/?search=beta")
    assert [i["title"] for i in resp.json()["results"]] == ["beta"]

    resp = owner_client.get(f"/api/projects/{project.id}/issues/?assignee_id={member.id}")
    assert resp.json()["count"] == 1


@pytest.mark.django_db
def test_my_issues(member, make_issue):
    make_issue(title="for bob", assignee_id=member.id)
    make_issue(title="unassigned")

    client = APIClient()
    client.force_authenticate(user=member)
    resp = client.get("/api/issues/mine/")

    assert [i["title"] for i in resp.json()["results"]] == ["for bob"]


@pytest.mark.django_db
def test_put_position_outside_column_range_is_400(owner_client, make_issue):
    issue = make_issue()

    for field in ("board_position", "backlog_position"):
        resp = owner_client.put(f"/api/issues/{issue.id}/", {field: 2 ** 31}, format="json")
        assert resp.status_code == 400, resp.content
        assert field in resp.json()

    resp = owner_client.put(f"/api/issues/{issue.id}/", {"backlog_position": -(2 ** 31) - 1}, format="json")
    assert resp.status_code == 400
    assert Issue.objects.get(id=issue.id).backlog_position == 1000
