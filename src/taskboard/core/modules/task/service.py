from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskboard.core.core import Service
from taskboard.core.modules.task.models import Task, TaskComment, TaskReply
from taskboard.errors import NotFoundError, ValidationError
from taskboard.utils import now

logger = structlog.get_logger(__name__)


class TaskService(Service):
    """Task store. Each comment write is a single atomic update of the task document."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("tasks")

    async def on_start(self) -> None:
        await self._collection.create_index([("assigned_to", 1)])
        await self._collection.create_index([("created_by", 1)])

    async def find_task(self, task_id: UUID) -> Task | None:
        """Get task by ID, or None if it does not exist."""
        return Task.from_mongo(await self._collection.find_one({"_id": task_id}))

    async def get_task(self, task_id: UUID) -> Task:
        """Get task by ID."""
        task = await self.find_task(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def create_task(
        self, title: str, description: str, assigned_to: UUID | None, created_by: UUID | None
    ) -> Task:
        """Create a task with an empty comment tree."""
        title = title.strip()
        if not title:
            raise ValidationError("Task title is required")
        if assigned_to is not None and not self.core.services.user.has_user(assigned_to):
            raise ValidationError(f"User '{assigned_to}' does not exist")

        res = await self._collection.insert_one(
            Task(title=title, description=description, assigned_to=assigned_to, created_by=created_by).to_mongo()
        )
        task = await self.get_task(res.inserted_id)
        if created_by is not None:
            await self.core.services.activity.log_activity(
                created_by, "create", "task", task.id, {"title": task.title, "assigned_to": str(assigned_to)}
            )
        return task

    async def append_comment(self, task_id: UUID, content: str, author_id: UUID) -> TaskComment | None:
        """Append a top-level comment. Returns the persisted node, or None if the task was not updated."""
        comment = TaskComment(content=content, author=author_id)
        result = await self._collection.update_one(
            {"_id": task_id},
            {"$push": {"comments": comment.to_mongo()}, "$set": {"updated_at": now()}},
        )
        if result.modified_count == 0:
            logger.warning("comment_append_failed", task_id=task_id, author_id=author_id)
            return None

        logger.debug("comment_appended", task_id=task_id, comment_id=comment.id)
        await self.core.services.activity.log_activity(author_id, "add_comment", "task", task_id, {"comment": content})
        return comment

    async def append_reply(self, task_id: UUID, parent_comment_id: UUID, content: str, author_id: UUID) -> TaskReply | None:
        """Append a reply under a top-level comment. Returns None if the task or parent was not matched."""
        reply = TaskReply(content=content, author=author_id, parent_comment_id=parent_comment_id)
        result = await self._collection.update_one(
            {"_id": task_id, "comments._id": parent_comment_id},
            {"$push": {"comments.$.replies": reply.to_mongo()}, "$set": {"updated_at": now()}},
        )
        if result.modified_count == 0:
            logger.warning("reply_append_failed", task_id=task_id, parent_comment_id=parent_comment_id)
            return None

        logger.debug("reply_appended", task_id=task_id, parent_comment_id=parent_comment_id, reply_id=reply.id)
        await self.core.services.activity.log_activity(
            author_id, "add_reply", "task", task_id, {"comment": content, "parent_comment_id": str(parent_comment_id)}
        )
        return reply
