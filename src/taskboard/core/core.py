from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from taskboard.config import Config

if TYPE_CHECKING:
    from taskboard.core.modules.access.service import AccessService
    from taskboard.core.modules.activity.service import ActivityService
    from taskboard.core.modules.comment.service import CommentService
    from taskboard.core.modules.notification.service import NotificationService
    from taskboard.core.modules.session.service import SessionService
    from taskboard.core.modules.task.service import TaskService
    from taskboard.core.modules.user.service import UserService

logger = structlog.get_logger(__name__)

# Start order. Each name maps to taskboard.core.modules.<name>.service.<Name>Service.
# The user cache must be warm before sessions resolve, tasks validate assignees
# or notifications pick action URLs.
SERVICE_NAMES = ("user", "session", "access", "activity", "notification", "task", "comment")


class Service:
    """A unit of domain logic, usually owning one collection.

    Services reach each other through `self.core.services`, which is wired
    after all of them are constructed.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Create indexes, warm caches."""

    async def on_stop(self) -> None:
        """Flush or cancel background work."""

    @property
    def core(self) -> Core:
        if self._core is None:
            raise RuntimeError(f"{type(self).__name__} used before set_core()")
        return self._core

    def set_core(self, core: Core) -> None:
        self._core = core


class Services:
    """Registry exposing each service as an attribute, started in SERVICE_NAMES order."""

    user: UserService
    session: SessionService
    access: AccessService
    activity: ActivityService
    notification: NotificationService
    task: TaskService
    comment: CommentService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        # Imported lazily: every service module imports Service from here
        self._ordered: list[Service] = []
        for name in SERVICE_NAMES:
            module = importlib.import_module(f"taskboard.core.modules.{name}.service")
            service_class = cast(type[Service], getattr(module, f"{name.capitalize()}Service"))
            service = service_class(database)
            setattr(self, name, service)
            self._ordered.append(service)

    def set_core(self, core: Core) -> None:
        for service in self._ordered:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._ordered:
            await service.on_start()
        logger.info("services_started", services=list(SERVICE_NAMES))

    async def stop_all(self) -> None:
        for service in reversed(self._ordered):
            await service.on_stop()


class Core:
    """Config, the MongoDB connection and the service registry."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        self.config = config
        # UUID ids and timezone-aware datetimes round-trip unchanged
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path.lstrip("/"))
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        await self.services.start_all()
        try:
            yield
        finally:
            await self.services.stop_all()
            await self.mongo_client.aclose()
