from taskboard.core.core import Service
from taskboard.core.modules.session.models import AuthToken
from taskboard.core.modules.task.models import Task
from taskboard.core.modules.user.models import User, UserRole
from taskboard.errors import AccessDeniedError

TASK_MANAGER_ROLES = frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.TEAM_LEADER})
COMMENT_MODERATOR_ROLES = frozenset({UserRole.ADMIN, UserRole.TEAM_LEADER})


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> User:
        """Ensure the user is authenticated."""
        return await self.core.services.session.get_authenticated_user(auth_token)

    async def ensure_admin(self, auth_token: AuthToken) -> User:
        """Ensure the authenticated user is admin, raise AccessDeniedError if not."""
        user = await self.ensure_authenticated(auth_token)
        if user.role != UserRole.ADMIN:
            raise AccessDeniedError("Admin privileges required")
        return user

    async def ensure_can_manage_tasks(self, auth_token: AuthToken) -> User:
        """Ensure the authenticated user may create tasks."""
        user = await self.ensure_authenticated(auth_token)
        if user.role not in TASK_MANAGER_ROLES:
            raise AccessDeniedError("Only admins, managers and team leaders can create tasks")
        return user

    def ensure_can_comment(self, user: User, task: Task) -> None:
        """Admins and team leaders may comment on any task, everyone else only on tasks assigned to them."""
        if user.role in COMMENT_MODERATOR_ROLES:
            return
        if task.assigned_to != user.id:
            raise AccessDeniedError("Unauthorized to comment on this task")

    def ensure_can_view_task(self, user: User, task: Task) -> None:
        """Members can only view their own tasks."""
        if user.role == UserRole.MEMBER and task.assigned_to != user.id:
            raise AccessDeniedError("Forbidden: You can only view your own tasks")
