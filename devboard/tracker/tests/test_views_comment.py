import pytest
from rest_framework.test import APIClient

from tracker.models import Notification


@pytest.mark.django_db
def test_comment_crud(owner_client, member, make_issue):
    issue = make_issue()

    resp = owner_client.post(f"/api/issues/{issue.id}/comments/", {"content": "hey @bob"}, format="json")
    assert resp.status_code == 201, resp.content
    comment = resp.json()
    assert comment["mentioned_usernames"] == ["bob"]

    resp = owner_client.put(f"/api/comments/{comment['id']}/", {"content": "edited"}, format="json")
    assert resp.json()["is_edited"] is True
    assert resp.json()["mentioned_usernames"] == []

    listing = owner_client.get(f"/api/issues/{issue.id}/comments/").json()
    assert [c["content"] for c in listing] == ["edited"]

    assert owner_client.delete(f"/api/comments/{comment['id']}/").status_code == 204
    assert owner_client.get(f"/api/issues/{issue.id}/comments/").json() == []


@pytest.mark.django_db
def test_comment_permissions(owner_client, member, outsider, make_issue):
    issue = make_issue()
    comment_id = owner_client.post(f"/api/issues/{issue.id}/comments/", {"content": "x"}, format="json").json()["id"]

    bob = APIClient()
    bob.force_authenticate(user=member)
    assert bob.put(f"/api/comments/{comment_id}/", {"content": "y"}, format="json").status_code == 403

    dave = APIClient()
    dave.force_authenticate(user=outsider)
    assert dave.get(f"/api/issues/{issue.id}/comments/").status_code == 403
    assert owner_client.put("/api/comments/999999/", {"content": "y"}, format="json").status_code == 404


@pytest.mark.django_db
def test_notification_endpoints(owner_client, owner, member, make_issue):
    issue = make_issue(user=member)
    owner_client.post(f"/api/issues/{issue.id}/comments/", {"content": "first"}, format="json")

    bob = APIClient()
    bob.force_authenticate(user=member)

    assert bob.get("/api/notifications/unread/count/").json() == {"count": 1}
    unread = bob.get("/api/notifications/unread/").json()
    assert unread[0]["type"] == Notification.Type.COMMENT_ADDED

    resp = bob.put(f"/api/notifications/{unread[0]['id']}/read/")
    assert resp.status_code == 200
    assert resp.json()["is_read"] is True
    assert owner_client.put(f"/api/notifications/{unread[0]['id']}/read/").status_code == 403

    assert bob.put("/api/notifications/read-all/").json() == {"updated": 0}
    assert len(bob.get("/api/notifications/").json()) == 1
