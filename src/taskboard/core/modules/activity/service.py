from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from taskboard.core.core import Service
from taskboard.core.modules.activity.models import ActivityLog

logger = structlog.get_logger(__name__)


class ActivityService(Service):
    """Append-only activity log."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("activity_logs")

    async def on_start(self) -> None:
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])
        await self._collection.create_index([("target_type", 1), ("target_id", 1)])

    async def log_activity(
        self, user_id: UUID, action: str, target_type: str, target_id: UUID, details: dict[str, Any] | None = None
    ) -> None:
        """Record an activity. A failed write is logged and never raised."""
        entry = ActivityLog(user_id=user_id, action=action, target_type=target_type, target_id=target_id, details=details or {})
        try:
            await self._collection.insert_one(entry.to_mongo())
        except PyMongoError as e:
            logger.exception("activity_log_failed", user_id=user_id, action=action, target_id=target_id, error=str(e))
