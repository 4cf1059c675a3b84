from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from taskboard.core.modules.notification.models import NotificationEvent
from taskboard.core.modules.task.models import CommentNode, TaskReply
from taskboard.core.modules.user.models import User
from taskboard.core.views import ViewModel

UNKNOWN_AUTHOR = "Unknown User"


class CommentView(ViewModel):
    """Comment or reply (API representation).

    `id` is the persisted node id, so it can be used as `parentCommentId` of a later reply.
    """

    id: UUID
    content: str
    author: UUID
    author_name: str
    author_avatar: str | None = None
    created_at: datetime
    type: Literal["comment"] = "comment"
    parent_comment_id: UUID | None = None

    @classmethod
    def from_node(cls, node: CommentNode, author: User | None) -> "CommentView":
        return cls(
            id=node.id,
            content=node.content,
            author=node.author,
            author_name=author.display_name if author else UNKNOWN_AUTHOR,
            author_avatar=author.avatar if author else None,
            created_at=node.created_at,
            parent_comment_id=node.parent_comment_id if isinstance(node, TaskReply) else None,
        )


class CommentThreadView(CommentView):
    """Top-level comment with its replies."""

    replies: list[CommentView] = Field(default_factory=list)


class CommentSubmission(BaseModel):
    """Outcome of a persisted comment: the view for the caller and the notifications still to send."""

    comment: CommentView
    events: list[NotificationEvent] = Field(default_factory=list)
