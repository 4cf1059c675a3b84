"""Who gets notified about a new comment or reply.

Nobody is notified about their own comment, and nobody is notified twice
for the same comment. The author of the comment being replied to gets a
reply notification and is therefore skipped for the generic comment
notifications; the task assignee and creator are deduplicated against
each other.
"""

from uuid import UUID

from taskboard.core.modules.notification.models import NotificationKind
from taskboard.core.modules.task.models import Task

Recipient = tuple[UUID, NotificationKind]


def plan_comment_recipients(task: Task, author_id: UUID) -> list[Recipient]:
    """Recipients of a new top-level comment: creator first, then assignee."""
    recipients: list[Recipient] = []
    if task.created_by is not None and task.created_by != author_id:
        recipients.append((task.created_by, NotificationKind.COMMENT))
    if task.assigned_to is not None and task.assigned_to != author_id and task.assigned_to != task.created_by:
        recipients.append((task.assigned_to, NotificationKind.COMMENT))
    return recipients


def plan_reply_recipients(task: Task, author_id: UUID, parent_author_id: UUID | None) -> list[Recipient]:
    """Recipients of a new reply: parent comment author, then assignee, then creator.

    `parent_author_id` is None when the parent comment could not be found.
    """
    recipients: list[Recipient] = []
    if parent_author_id is not None and parent_author_id != author_id:
        recipients.append((parent_author_id, NotificationKind.REPLY))

    assigned_to = task.assigned_to
    if assigned_to is not None and assigned_to != author_id and parent_author_id != assigned_to:
        recipients.append((assigned_to, NotificationKind.COMMENT))

    created_by = task.created_by
    if (
        created_by is not None
        and created_by != author_id
        and parent_author_id != created_by
        and created_by != assigned_to
    ):
        recipients.append((created_by, NotificationKind.COMMENT))
    return recipients
