from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import UUID

from taskboard.config import Config
from taskboard.core.core import Core
from taskboard.core.modules.comment.models import CommentThreadView, CommentView
from taskboard.core.modules.comment.validators import validate_comment_content
from taskboard.core.modules.notification.models import NotificationFeed
from taskboard.core.modules.session.models import AuthToken
from taskboard.core.modules.task.models import Task
from taskboard.core.modules.task.views import TaskView
from taskboard.core.modules.user.models import UserRole, UserView
from taskboard.errors import AuthenticationError


class App:
    """Facade for all application operations, validates permissions before delegating to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def get_version(self, auth_token: AuthToken) -> dict[str, str]:
        """Get build information (requires authentication)."""
        await self._core.services.access.ensure_authenticated(auth_token)
        config = self._core.config
        return {
            "git_commit_hash": config.git_commit_hash,
            "git_commit_date": config.git_commit_date,
            "build_time": config.build_time,
        }

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def login(self, email: str, password: str) -> AuthToken:
        """Authenticate user and create session."""
        if not self._core.services.user.verify_password(email, password):
            raise AuthenticationError("Invalid email or password")
        user = self._core.services.user.get_user_by_email(email)
        return await self._core.services.session.create_session(user.id)

    async def logout(self, auth_token: AuthToken) -> None:
        await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    # === Users ===
    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(current_user)

    async def change_password(self, auth_token: AuthToken, old_password: str, new_password: str) -> None:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.user.change_password(current_user.id, old_password, new_password)

    async def set_telegram_chat(self, auth_token: AuthToken, chat_id: str | None) -> UserView:
        """Link the current user's Telegram chat for notification mirroring."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        user = await self._core.services.user.set_telegram_chat_id(current_user.id, chat_id)
        return UserView.from_domain(user)

    async def get_all_users(self, auth_token: AuthToken) -> list[UserView]:
        await self._core.services.access.ensure_authenticated(auth_token)
        return [UserView.from_domain(user) for user in self._core.services.user.get_all_users()]

    async def create_user(
        self,
        auth_token: AuthToken,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole,
        avatar: str | None = None,
    ) -> UserView:
        """Create a new user (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        user = await self._core.services.user.create_user(email, password, first_name, last_name, role, avatar)
        return UserView.from_domain(user)

    # === Tasks ===
    async def create_task(
        self, auth_token: AuthToken, title: str, description: str, assigned_to: UUID | None
    ) -> TaskView:
        """Create a task (admins, managers and team leaders)."""
        current_user = await self._core.services.access.ensure_can_manage_tasks(auth_token)
        task = await self._core.services.task.create_task(title, description, assigned_to, current_user.id)
        await self._core.services.notification.notify_task_assigned(task, current_user)
        return self._task_view(task)

    async def get_task(self, auth_token: AuthToken, task_id: UUID) -> TaskView:
        """Get task with its comment tree (members only their own tasks)."""
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        task = await self._core.services.task.get_task(task_id)
        self._core.services.access.ensure_can_view_task(current_user, task)
        return self._task_view(task)

    # === Comments ===
    async def get_task_comments(self, auth_token: AuthToken, task_id: UUID) -> list[CommentThreadView]:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        task = await self._core.services.task.get_task(task_id)
        self._core.services.access.ensure_can_view_task(current_user, task)
        return self._core.services.comment.get_comment_thread(task)

    async def create_task_comment(
        self, auth_token: AuthToken, task_id: UUID, content: str, parent_comment_id: UUID | None = None
    ) -> CommentView:
        """Comment on a task, or reply to one of its top-level comments.

        Checks run before anything is written: identity, content, task, permission.
        Notifications go out after the comment is stored and never fail the call.
        """
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        content = validate_comment_content(content)
        task = await self._core.services.task.get_task(task_id)
        self._core.services.access.ensure_can_comment(current_user, task)

        submission = await self._core.services.comment.submit_comment(task, current_user, content, parent_comment_id)
        await self._core.services.notification.dispatch_events(submission.events)
        return submission.comment

    # === Notifications ===
    async def get_notifications(
        self, auth_token: AuthToken, limit: int = 20, offset: int = 0, unread_only: bool = False
    ) -> NotificationFeed:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.notification.list_notifications(current_user.id, limit, offset, unread_only)

    async def mark_notification_read(self, auth_token: AuthToken, notification_id: UUID) -> None:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.notification.mark_read(current_user.id, notification_id)

    async def mark_all_notifications_read(self, auth_token: AuthToken) -> int:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.notification.mark_all_read(current_user.id)

    async def delete_notification(self, auth_token: AuthToken, notification_id: UUID) -> None:
        current_user = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.notification.delete_notification(current_user.id, notification_id)

    # === Private helpers ===
    def _task_view(self, task: Task) -> TaskView:
        users = self._core.services.user
        assignee = users.find_user(task.assigned_to) if task.assigned_to else None
        creator = users.find_user(task.created_by) if task.created_by else None
        return TaskView.from_domain(task, assignee, creator, self._core.services.comment.get_comment_thread(task))
