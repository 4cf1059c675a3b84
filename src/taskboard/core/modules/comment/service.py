from uuid import UUID

import structlog

from taskboard.core.core import Service
from taskboard.core.modules.comment.fanout import plan_comment_recipients, plan_reply_recipients
from taskboard.core.modules.comment.models import CommentSubmission, CommentThreadView, CommentView
from taskboard.core.modules.comment.validators import validate_comment_content
from taskboard.core.modules.notification.models import NotificationEvent
from taskboard.core.modules.task.models import Task
from taskboard.core.modules.user.models import User
from taskboard.errors import NotFoundError, PersistenceError
from taskboard.utils import excerpt

logger = structlog.get_logger(__name__)


class CommentService(Service):
    """Attaches comments and replies to a task's comment tree and decides who to notify.

    Callers must have loaded the task and checked that the actor may comment on it.
    Notifications are returned as events, not sent.
    """

    async def submit_comment(
        self, task: Task, actor: User, content: str, parent_comment_id: UUID | None = None
    ) -> CommentSubmission:
        """Append a top-level comment, or a reply when `parent_comment_id` is given."""
        content = validate_comment_content(content)

        if parent_comment_id is not None:
            parent = task.get_comment(parent_comment_id)
            if parent is None:
                raise NotFoundError("Parent comment not found")

            node = await self.core.services.task.append_reply(task.id, parent_comment_id, content, actor.id)
            if node is None:
                raise PersistenceError("Failed to add comment")

            # Re-read so the parent author reflects the stored tree
            updated = await self.core.services.task.find_task(task.id)
            stored_parent = updated.get_comment(parent_comment_id) if updated else None
            parent_author = stored_parent.author if stored_parent else None
            recipients = plan_reply_recipients(task, actor.id, parent_author)
        else:
            node = await self.core.services.task.append_comment(task.id, content, actor.id)
            if node is None:
                raise PersistenceError("Failed to add comment")
            recipients = plan_comment_recipients(task, actor.id)

        quoted = excerpt(content, self.core.config.excerpt_length)
        events = [
            NotificationEvent(
                recipient_id=recipient_id,
                task_id=task.id,
                task_title=task.title,
                actor_id=actor.id,
                actor_name=actor.display_name,
                excerpt=quoted,
                kind=kind,
            )
            for recipient_id, kind in recipients
        ]

        logger.info(
            "comment_added",
            task_id=task.id,
            comment_id=node.id,
            parent_comment_id=parent_comment_id,
            author_id=actor.id,
            recipients=len(events),
        )
        return CommentSubmission(comment=CommentView.from_node(node, actor), events=events)

    def get_comment_thread(self, task: Task) -> list[CommentThreadView]:
        """Build the task's comment tree with author names and avatars resolved."""
        users = self.core.services.user
        threads = []
        for comment in task.comments:
            view = CommentView.from_node(comment, users.find_user(comment.author))
            replies = [CommentView.from_node(reply, users.find_user(reply.author)) for reply in comment.replies]
            threads.append(CommentThreadView(**view.model_dump(), replies=replies))
        return threads
