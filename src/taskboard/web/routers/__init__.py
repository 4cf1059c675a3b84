from taskboard.web.routers.auth import router as auth_router
from taskboard.web.routers.comments import router as comments_router
from taskboard.web.routers.metadata import router as metadata_router
from taskboard.web.routers.notifications import router as notifications_router
from taskboard.web.routers.profile import router as profile_router
from taskboard.web.routers.tasks import router as tasks_router
from taskboard.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "comments_router",
    "metadata_router",
    "notifications_router",
    "profile_router",
    "tasks_router",
    "users_router",
]
