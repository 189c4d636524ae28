import pytest
from django.core.exceptions import PermissionDenied, ValidationError

from tracker.models import Comment, Mention, Notification
from tracker.services.comment import CommentService
from tracker.services.mention import extract_usernames


def test_extract_usernames_dedupes_in_order():
    text = "ping @bob and @carol_1, again @bob; @ab is too short, mail me@x"
    assert extract_usernames(text) == ["bob", "carol_1"]


@pytest.mark.django_db
def test_mentions_only_reach_project_members(owner, member, outsider, make_issue):
    issue = make_issue()

    comment = CommentService.create_comment(
        issue=issue, author=owner, content="@bob @bob @alice @dave @nobody please look"
    )

    assert list(Mention.objects.filter(comment=comment).values_list("mentioned_user__username", flat=True)) == ["bob"]
    assert Notification.objects.filter(user=member, type=Notification.Type.MENTION).count() == 1
    assert not Notification.objects.filter(user=outsider).exists()


@pytest.mark.django_db
def test_reporter_is_told_about_new_comments(owner, member, make_issue):
    issue = make_issue()

    CommentService.create_comment(issue=issue, author=member, content="Looks good")

    note = Notification.objects.get(user=owner)
    assert note.type == Notification.Type.COMMENT_ADDED


@pytest.mark.django_db
def test_empty_comment_rejected(owner, make_issue):
    with pytest.raises(ValidationError):
        CommentService.create_comment(issue=make_issue(), author=owner, content="   ")


@pytest.mark.django_db
def test_viewer_cannot_comment(viewer, make_issue):
    with pytest.raises(PermissionDenied):
        CommentService.create_comment(issue=make_issue(), author=viewer, content="hi")


@pytest.mark.django_db
def test_only_author_edits_and_mentions_are_reparsed(owner, member, viewer, make_issue):
    comment = CommentService.create_comment(issue=make_issue(), author=owner, content="cc @bob")

    with pytest.raises(PermissionDenied):
        CommentService.update_comment(comment=comment, user=member, content="hijack")

    CommentService.update_comment(comment=comment, user=owner, content="cc @bob @carol")

    comment.refresh_from_db()
    assert comment.is_edited is True
    assert set(comment.mentions.values_list("mentioned_user__username", flat=True)) == {"bob", "carol"}
    # bob was already mentioned, only carol gets a new notice
    assert Notification.objects.filter(user=member, type=Notification.Type.MENTION).count() == 1
    assert Notification.objects.filter(user=viewer, type=Notification.Type.MENTION).count() == 1


@pytest.mark.django_db
def test_delete_by_author_or_owner_only(owner, member, make_issue):
    issue = make_issue()
    by_bob = CommentService.create_comment(issue=issue, author=member, content="mine")
    by_alice = CommentService.create_comment(issue=issue, author=owner, content="owner's")

    with pytest.raises(PermissionDenied):
        CommentService.delete_comment(comment=by_alice, user=member)

    CommentService.delete_comment(comment=by_bob, user=owner)
    assert list(Comment.objects.values_list("id", flat=True)) == [by_alice.id]
