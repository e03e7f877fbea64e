# mypy: ignore-errors
"""Tests for comments and reply-tree deletion."""

import pytest

from colloquium.db.ids import new_id
from colloquium.models import Comment, Post
from colloquium.services.errors import ForbiddenError, NotFoundError


@pytest.fixture()
def post(post_service, community, doctor):
    return post_service.create_post(
        doctor.id, title="Discussion", content="Thoughts?", forum_id=community.id
    )


def test_create_comment_updates_counters(db_session, comment_service, post, other_doctor) -> None:
    comment = comment_service.create_comment(other_doctor.id, post.id, "  Agreed  ")

    assert comment.content == "Agreed"
    assert comment.parent_comment_id is None
    assert post.comment_count == 1
    db_session.refresh(other_doctor)
    assert (other_doctor.comment_count, other_doctor.contribution_count) == (1, 1)


def test_unverified_users_cannot_comment(comment_service, post, unverified_user) -> None:
    with pytest.raises(ForbiddenError):
        comment_service.create_comment(unverified_user.id, post.id, "Hello")


def test_parent_must_belong_to_same_post(
    comment_service, post_service, community, post, doctor
) -> None:
    other_post = post_service.create_post(
        doctor.id, title="Elsewhere", content="Other thread", forum_id=community.id
    )
    foreign = comment_service.create_comment(doctor.id, other_post.id, "Over here")

    with pytest.raises(NotFoundError):
        comment_service.create_comment(doctor.id, post.id, "Reply", foreign.id)
    with pytest.raises(NotFoundError):
        comment_service.create_comment(doctor.id, "missing-post", "Reply")


def test_list_comments_oldest_first(comment_service, post, doctor, other_doctor) -> None:
    first = comment_service.create_comment(doctor.id, post.id, "One")
    second = comment_service.create_comment(other_doctor.id, post.id, "Two")
    assert [c.id for c in comment_service.list_comments(post.id)] == [first.id, second.id]


def test_only_author_edits(comment_service, post, doctor, other_doctor) -> None:
    comment = comment_service.create_comment(doctor.id, post.id, "Typo")
    assert comment_service.edit_comment(doctor.id, comment.id, "Fixed").content == "Fixed"
    assert comment.updated_at is not None
    with pytest.raises(ForbiddenError):
        comment_service.edit_comment(other_doctor.id, comment.id, "Mine now")


def test_subtree_deletion_counts(
    db_session, comment_service, post, owner, doctor, other_doctor, notification_service
) -> None:
    """A root with two replies and one nested reply deletes four comments."""
    root = comment_service.create_comment(doctor.id, post.id, "Root")
    reply_a = comment_service.create_comment(other_doctor.id, post.id, "Reply A", root.id)
    comment_service.create_comment(other_doctor.id, post.id, "Reply B", root.id)
    comment_service.create_comment(doctor.id, post.id, "Nested", reply_a.id)
    sibling = comment_service.create_comment(owner.id, post.id, "Unrelated")
    assert post.comment_count == 5

    result = comment_service.delete_comment(owner.id, root.id)

    assert result.deleted_count == 4
    assert result.is_moderator_action is True
    assert result.notified is True
    db_session.refresh(post)
    assert post.comment_count == 1
    assert [c.id for c in db_session.query(Comment).all()] == [sibling.id]

    db_session.refresh(doctor)
    db_session.refresh(other_doctor)
    assert doctor.comment_count == 0
    assert other_doctor.comment_count == 0
    # The post itself still counts as one contribution for its author.
    assert doctor.contribution_count == 1

    assert [n.type for n in notification_service.list_for_user(doctor.id)] == ["comment_deleted"]


def test_author_deletes_own_comment(comment_service, post, doctor, notification_service) -> None:
    comment = comment_service.create_comment(doctor.id, post.id, "Never mind")
    result = comment_service.delete_comment(doctor.id, comment.id)
    assert result.deleted_count == 1
    assert result.is_moderator_action is False
    assert notification_service.list_for_user(doctor.id) == []


def test_system_moderator_can_delete(comment_service, post, doctor, admin) -> None:
    comment = comment_service.create_comment(doctor.id, post.id, "Off-topic")
    assert comment_service.delete_comment(admin.id, comment.id).is_moderator_action


def test_stranger_cannot_delete(comment_service, post, doctor, other_doctor) -> None:
    comment = comment_service.create_comment(doctor.id, post.id, "Mine")
    with pytest.raises(ForbiddenError):
        comment_service.delete_comment(other_doctor.id, comment.id)


def test_delete_missing_comment(comment_service, doctor) -> None:
    with pytest.raises(NotFoundError):
        comment_service.delete_comment(doctor.id, "missing")


def test_deep_thread_is_deleted_without_recursion(
    db_session, comment_service, post, doctor
) -> None:
    """A reply chain deeper than the recursion limit is removed in one call."""
    root = parent = Comment(id=new_id(), content="0", author_id=doctor.id, post_id=post.id)
    db_session.add(root)
    for depth in range(1, 1200):
        child = Comment(
            id=new_id(),
            content=str(depth),
            author_id=doctor.id,
            post_id=post.id,
            parent_comment_id=parent.id,
        )
        db_session.add(child)
        parent = child
    db_session.flush()
    db_session.get(Post, post.id).comment_count = 1200
    db_session.commit()

    result = comment_service.delete_comment(doctor.id, root.id)

    assert result.deleted_count == 1200
    assert db_session.query(Comment).count() == 0
