"""Tests for comment notification recipient planning."""

from itertools import product
from uuid import UUID

from taskboard.core.modules.comment.fanout import plan_comment_recipients, plan_reply_recipients
from taskboard.core.modules.notification.models import NotificationKind
from taskboard.core.modules.task.models import Task

U1 = UUID("10000000-0000-4000-8000-000000000001")
U2 = UUID("10000000-0000-4000-8000-000000000002")
U3 = UUID("10000000-0000-4000-8000-000000000003")

COMMENT = NotificationKind.COMMENT
REPLY = NotificationKind.REPLY


def make_task(created_by: UUID | None, assigned_to: UUID | None) -> Task:
    return Task(title="Fix login", created_by=created_by, assigned_to=assigned_to)


class TestPlanCommentRecipients:
    """Tests for top-level comment recipients."""

    def test_distinct_creator_and_assignee_both_notified(self):
        """Test that a third party's comment notifies the creator, then the assignee."""
        assert plan_comment_recipients(make_task(U1, U2), U3) == [(U1, COMMENT), (U2, COMMENT)]

    def test_creator_equal_to_assignee_notified_once(self):
        """Test that a creator who is also the assignee gets exactly one notification."""
        assert plan_comment_recipients(make_task(U1, U1), U2) == [(U1, COMMENT)]

    def test_creator_commenting_notifies_assignee_only(self):
        """Test that the task creator is not notified about their own comment."""
        assert plan_comment_recipients(make_task(U1, U2), U1) == [(U2, COMMENT)]

    def test_assignee_commenting_notifies_creator_only(self):
        """Test that the assignee is not notified about their own comment."""
        assert plan_comment_recipients(make_task(U1, U2), U2) == [(U1, COMMENT)]

    def test_task_without_people_notifies_nobody(self):
        """Test that a task with no creator and no assignee produces no recipients."""
        assert plan_comment_recipients(make_task(None, None), U3) == []


class TestPlanReplyRecipients:
    """Tests for reply recipients."""

    def test_reply_to_assignee_comment_suppresses_duplicate(self):
        """Test that the assignee who wrote the parent comment gets only the reply notification."""
        recipients = plan_reply_recipients(make_task(U1, U2), U3, parent_author_id=U2)
        assert recipients == [(U2, REPLY), (U1, COMMENT)]

    def test_reply_to_creator_comment(self):
        """Test that the creator who wrote the parent comment gets a reply notification and the assignee a comment one."""
        recipients = plan_reply_recipients(make_task(U1, U2), U3, parent_author_id=U1)
        assert recipients == [(U1, REPLY), (U2, COMMENT)]

    def test_reply_to_own_comment_skips_reply_notification(self):
        """Test that replying to yourself does not notify you."""
        recipients = plan_reply_recipients(make_task(U1, U2), U3, parent_author_id=U3)
        assert recipients == [(U2, COMMENT), (U1, COMMENT)]

    def test_missing_parent_notifies_assignee_and_creator(self):
        """Test that an unresolved parent author falls back to the generic comment notifications."""
        recipients = plan_reply_recipients(make_task(U1, U2), U3, parent_author_id=None)
        assert recipients == [(U2, COMMENT), (U1, COMMENT)]

    def test_creator_equal_to_assignee_notified_once(self):
        """Test that a creator who is also the assignee is notified once as assignee."""
        recipients = plan_reply_recipients(make_task(U1, U1), U3, parent_author_id=U2)
        assert recipients == [(U2, REPLY), (U1, COMMENT)]

    def test_assignee_replying_to_creator(self):
        """Test that the assignee replying to the creator's comment notifies only the creator."""
        recipients = plan_reply_recipients(make_task(U1, U2), U2, parent_author_id=U1)
        assert recipients == [(U1, REPLY)]


class TestRecipientInvariants:
    """Exhaustive checks over small sets of people."""

    PEOPLE = [U1, U2, U3, None]

    def test_author_never_notified(self):
        """Test that no plan ever includes the author."""
        for created_by, assigned_to, parent_author, author in product(self.PEOPLE, self.PEOPLE, self.PEOPLE, [U1, U2, U3]):
            task = make_task(created_by, assigned_to)
            for recipients in (
                plan_comment_recipients(task, author),
                plan_reply_recipients(task, author, parent_author),
            ):
                assert author not in [recipient for recipient, _ in recipients]

    def test_no_recipient_notified_twice(self):
        """Test that every recipient appears at most once per plan."""
        for created_by, assigned_to, parent_author, author in product(self.PEOPLE, self.PEOPLE, self.PEOPLE, [U1, U2, U3]):
            task = make_task(created_by, assigned_to)
            for recipients in (
                plan_comment_recipients(task, author),
                plan_reply_recipients(task, author, parent_author),
            ):
                ids = [recipient for recipient, _ in recipients]
                assert len(ids) == len(set(ids))

    def test_at_most_one_reply_notification(self):
        """Test that only the parent comment author can receive a reply notification."""
        for created_by, assigned_to, parent_author, author in product(self.PEOPLE, self.PEOPLE, self.PEOPLE, [U1, U2, U3]):
            recipients = plan_reply_recipients(make_task(created_by, assigned_to), author, parent_author)
            replies = [recipient for recipient, kind in recipients if kind == REPLY]
            assert replies in ([], [parent_author])
