import asyncio
from collections.abc import Sequence
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from taskboard.core.core import Service
from taskboard.core.modules.notification.models import (
    Notification,
    NotificationEvent,
    NotificationFeed,
    NotificationKind,
    NotificationType,
    NotificationView,
)
from taskboard.core.modules.notification.sender import render_telegram_text, send_telegram_message
from taskboard.core.modules.task.models import Task
from taskboard.core.modules.user.models import User, UserRole
from taskboard.core.pagination import PaginationResult
from taskboard.errors import NotFoundError, NotificationError
from taskboard.utils import now

logger = structlog.get_logger(__name__)


def task_action_url(recipient: User | None, task_id: UUID) -> str:
    """Frontend path to a task, depending on which dashboard the recipient uses."""
    if recipient is not None:
        if recipient.role == UserRole.TEAM_LEADER:
            return f"/team_leader/tasks/{task_id}"
        if recipient.role == UserRole.MANAGER:
            return f"/manager/tasks/{task_id}"
    return f"/member/tasks/{task_id}"


class NotificationService(Service):
    """Stores inbox notifications, delivers comment events and mirrors them to Telegram."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notifications")
        self._delivery_tasks: set[asyncio.Task[None]] = set()

    async def on_start(self) -> None:
        await self._collection.create_index([("recipient_id", 1), ("created_at", -1)])
        await self._collection.create_index([("recipient_id", 1), ("is_read", 1)])
        logger.debug("notification_service_started")

    async def on_stop(self) -> None:
        """Let pending Telegram deliveries finish."""
        if self._delivery_tasks:
            await asyncio.gather(*self._delivery_tasks, return_exceptions=True)

    async def create_notification(self, notification: Notification) -> Notification:
        """Persist a notification and mirror it to the recipient's Telegram chat in the background."""
        try:
            await self._collection.insert_one(notification.to_mongo())
        except PyMongoError as e:
            raise NotificationError(f"Failed to store notification for {notification.recipient_id}") from e

        logger.info(
            "notification_created",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            type=notification.type,
        )
        self._mirror_to_telegram(notification)
        return notification

    async def notify_comment(self, event: NotificationEvent) -> Notification | None:
        """Tell a task's creator or assignee about a new comment. Returns None for self-notifications."""
        if event.recipient_id == event.actor_id:
            return None
        recipient = self.core.services.user.find_user(event.recipient_id)
        return await self.create_notification(
            Notification(
                title=f"{event.actor_name} commented on your task",
                message=f'{event.actor_name} commented on task "{event.task_title}": "{event.excerpt}"',
                type=NotificationType.TASK_UPDATED,
                recipient_id=event.recipient_id,
                sender_id=event.actor_id,
                target_type="task",
                target_id=event.task_id,
                action_url=task_action_url(recipient, event.task_id),
                data={"task_id": str(event.task_id), "task_title": event.task_title, "action": "task_comment"},
            )
        )

    async def notify_reply(self, event: NotificationEvent) -> Notification | None:
        """Tell a comment author that someone replied. Returns None for self-notifications."""
        if event.recipient_id == event.actor_id:
            return None
        recipient = self.core.services.user.find_user(event.recipient_id)
        return await self.create_notification(
            Notification(
                title=f"{event.actor_name} replied to your comment",
                message=f'{event.actor_name} replied to your comment in task "{event.task_title}": "{event.excerpt}"',
                type=NotificationType.TASK_UPDATED,
                recipient_id=event.recipient_id,
                sender_id=event.actor_id,
                target_type="task",
                target_id=event.task_id,
                action_url=task_action_url(recipient, event.task_id),
                data={"task_id": str(event.task_id), "task_title": event.task_title, "action": "comment_reply"},
            )
        )

    async def dispatch_events(self, events: Sequence[NotificationEvent]) -> list[NotificationEvent]:
        """Deliver events in order, one attempt each. Returns the events that failed.

        A failure is logged and does not stop the remaining deliveries.
        """
        failed: list[NotificationEvent] = []
        for event in events:
            try:
                if event.kind == NotificationKind.REPLY:
                    await self.notify_reply(event)
                else:
                    await self.notify_comment(event)
            except Exception as e:
                failed.append(event)
                logger.exception(
                    "notification_dispatch_failed",
                    kind=event.kind,
                    task_id=event.task_id,
                    recipient_id=event.recipient_id,
                    error=str(e),
                )
        return failed

    async def notify_task_assigned(self, task: Task, actor: User) -> Notification | None:
        """Tell the assignee about a new task. Best-effort: a failure is logged and None returned."""
        if task.assigned_to is None or task.assigned_to == actor.id:
            return None
        recipient = self.core.services.user.find_user(task.assigned_to)
        notification = Notification(
            title="New task assigned",
            message=f'{actor.display_name} assigned you the task "{task.title}".',
            type=NotificationType.TASK_ASSIGNED,
            recipient_id=task.assigned_to,
            sender_id=actor.id,
            target_type="task",
            target_id=task.id,
            action_url=task_action_url(recipient, task.id),
            data={"task_id": str(task.id), "task_title": task.title, "action": "assigned"},
        )
        try:
            return await self.create_notification(notification)
        except NotificationError as e:
            logger.exception("task_assigned_notification_failed", task_id=task.id, recipient_id=task.assigned_to, error=str(e))
            return None

    async def list_notifications(
        self, user_id: UUID, limit: int = 20, offset: int = 0, unread_only: bool = False
    ) -> NotificationFeed:
        """Get a page of the user's notifications, newest first."""
        query: dict[str, Any] = {"recipient_id": user_id}
        if unread_only:
            query["is_read"] = False

        total = await self._collection.count_documents(query)
        unread_count = await self._collection.count_documents({"recipient_id": user_id, "is_read": False})
        cursor = self._collection.find(query).sort("created_at", -1).skip(offset).limit(limit)
        items = [NotificationView.from_domain(n) for n in await Notification.list_cursor(cursor)]

        return NotificationFeed(
            page=PaginationResult(items=items, total=total, limit=limit, offset=offset),
            unread_count=unread_count,
        )

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> None:
        """Mark one of the user's notifications as read."""
        result = await self._collection.update_one(
            {"_id": notification_id, "recipient_id": user_id}, {"$set": {"is_read": True, "read_at": now()}}
        )
        if result.matched_count == 0:
            raise NotFoundError("Notification not found")

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark all unread notifications of the user as read, returning how many changed."""
        result = await self._collection.update_many(
            {"recipient_id": user_id, "is_read": False}, {"$set": {"is_read": True, "read_at": now()}}
        )
        return result.modified_count

    async def delete_notification(self, user_id: UUID, notification_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": notification_id, "recipient_id": user_id})
        if result.deleted_count == 0:
            raise NotFoundError("Notification not found")

    def _mirror_to_telegram(self, notification: Notification) -> None:
        token = self.core.config.telegram_bot_token
        if not token:
            return
        recipient = self.core.services.user.find_user(notification.recipient_id)
        if recipient is None or not recipient.telegram_chat_id:
            return

        text = render_telegram_text(notification, self.core.config.frontend_url)
        task = asyncio.create_task(self._deliver_telegram(token, recipient.telegram_chat_id, text, notification.id))
        self._delivery_tasks.add(task)
        task.add_done_callback(self._delivery_tasks.discard)

    async def _deliver_telegram(self, token: str, chat_id: str, text: str, notification_id: UUID) -> None:
        success, error_msg = await send_telegram_message(token, chat_id, text)
        if not success:
            logger.warning("telegram_mirror_failed", notification_id=notification_id, error=error_msg)
