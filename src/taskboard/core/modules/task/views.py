from datetime import datetime
from uuid import UUID

from pydantic import Field

from taskboard.core.modules.comment.models import CommentThreadView
from taskboard.core.modules.task.models import Task
from taskboard.core.modules.user.models import User
from taskboard.core.views import ViewModel


class TaskView(ViewModel):
    """Task with people resolved to display names and the full comment tree."""

    id: UUID
    title: str
    description: str
    assigned_to: UUID | None = None
    assigned_to_name: str | None = None
    created_by: UUID | None = None
    created_by_name: str | None = None
    comments: list[CommentThreadView] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(
        cls, task: Task, assignee: User | None, creator: User | None, comments: list[CommentThreadView]
    ) -> "TaskView":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            assigned_to=task.assigned_to,
            assigned_to_name=assignee.display_name if assignee else None,
            created_by=task.created_by,
            created_by_name=creator.display_name if creator else None,
            comments=comments,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )
