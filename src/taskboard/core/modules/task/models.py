from datetime import datetime
from uuid import UUID

from pydantic import Field

from taskboard.core.db import EmbeddedDocument, MongoModel
from taskboard.utils import now


class CommentNode(EmbeddedDocument):
    """Fields shared by top-level comments and replies, embedded in the task document."""

    content: str
    author: UUID
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class TaskReply(CommentNode):
    """Reply to a top-level comment. Has no replies of its own."""

    parent_comment_id: UUID


class TaskComment(CommentNode):
    """Top-level comment on a task, owning its replies in chronological order."""

    replies: list[TaskReply] = Field(default_factory=list)


class Task(MongoModel):
    """Task with its embedded comment tree."""

    title: str
    description: str = ""
    assigned_to: UUID | None = None
    created_by: UUID | None = None
    comments: list[TaskComment] = Field(default_factory=list)  # Insertion order is chronological
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def get_comment(self, comment_id: UUID) -> TaskComment | None:
        """Get a top-level comment by id. Replies are never returned."""
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None
