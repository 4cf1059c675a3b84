"""Notification models: persisted inbox entries and the post-commit events that produce them."""

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from taskboard.core.db import MongoModel
from taskboard.core.pagination import PaginationResult
from taskboard.core.views import ViewModel
from taskboard.utils import now


class NotificationType(StrEnum):
    """Categories shown in the user's notification inbox."""

    TASK_ASSIGNED = "task_assigned"
    TASK_UPDATED = "task_updated"
    PROJECT_ASSIGNED = "project_assigned"
    PROJECT_UPDATED = "project_updated"
    TEAM_INVITATION = "team_invitation"
    DEADLINE_REMINDER = "deadline_reminder"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


class NotificationKind(StrEnum):
    """Why a recipient is told about a new comment.

    - REPLY: someone replied to the recipient's comment
    - COMMENT: someone commented on a task the recipient created or is assigned to
    """

    REPLY = "reply"
    COMMENT = "comment"


class NotificationEvent(BaseModel):
    """A notification to be sent once a comment has been persisted.

    Produced by the comment engine, delivered by the notification service.
    """

    recipient_id: UUID
    task_id: UUID
    task_title: str
    actor_id: UUID
    actor_name: str
    excerpt: str
    kind: NotificationKind


class Notification(MongoModel):
    """Notification stored in the recipient's inbox.

    Indexed on (recipient_id, created_at) and (recipient_id, is_read).
    """

    title: str
    message: str
    type: NotificationType
    recipient_id: UUID
    sender_id: UUID | None = None
    target_type: str | None = None
    target_id: UUID | None = None
    action_url: str | None = None  # Frontend path, e.g. /member/tasks/{id}
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False
    created_at: datetime = Field(default_factory=now)
    read_at: datetime | None = None


class NotificationView(ViewModel):
    """Notification (API representation)."""

    id: UUID
    title: str
    message: str
    type: NotificationType
    sender_id: UUID | None = None
    target_type: str | None = None
    target_id: UUID | None = None
    action_url: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime
    read_at: datetime | None = None

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationView":
        return cls.model_validate(notification.model_dump())


class NotificationFeed(ViewModel):
    """A page of notifications plus the recipient's total unread count."""

    page: PaginationResult[NotificationView]
    unread_count: int = Field(..., ge=0)
