from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from taskboard.core.db import MongoModel
from taskboard.utils import now


class ActivityLog(MongoModel):
    """Audit record of a user action on a target entity."""

    user_id: UUID
    action: str  # e.g. create, add_comment, add_reply
    target_type: str  # e.g. task
    target_id: UUID
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=now)
