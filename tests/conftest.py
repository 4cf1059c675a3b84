"""Shared pytest fixtures.

Services under test run against in-memory stand-ins for MongoDB collections
and for the collaborators they do not own.
"""

from collections.abc import AsyncIterator
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock
from uuid import UUID

import pytest
from pymongo.errors import PyMongoError

from taskboard.app import App
from taskboard.config import Config
from taskboard.core.modules.access.service import AccessService
from taskboard.core.modules.comment.service import CommentService
from taskboard.core.modules.notification.service import NotificationService
from taskboard.core.modules.session.models import AuthToken
from taskboard.core.modules.task.models import Task, TaskComment, TaskReply
from taskboard.core.modules.user.models import User, UserRole
from taskboard.errors import AuthenticationError, NotFoundError

ADMIN_ID = UUID("00000000-0000-4000-8000-000000000001")
LEADER_ID = UUID("00000000-0000-4000-8000-000000000002")
MANAGER_ID = UUID("00000000-0000-4000-8000-000000000003")
MEMBER_ID = UUID("00000000-0000-4000-8000-000000000004")
OUTSIDER_ID = UUID("00000000-0000-4000-8000-000000000005")
TASK_ID = UUID("00000000-0000-4000-8000-0000000000a1")


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._docs = self._docs[:count]
        return self

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        for doc in self._docs:
            yield doc


class FakeCollection:
    """Equality-matching subset of an async pymongo collection."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.fail_for_recipients: set[UUID] = set()

    async def create_index(self, *args: Any, **kwargs: Any) -> None:
        return None

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        if doc.get("recipient_id") in self.fail_for_recipients:
            raise PyMongoError("write failed")
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for doc in self.docs if _matches(doc, query))

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([doc for doc in self.docs if _matches(doc, query or {})])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_many(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        matched = [doc for doc in self.docs if _matches(doc, query)]
        for doc in matched:
            doc.update(update.get("$set", {}))
        return SimpleNamespace(matched_count=len(matched), modified_count=len(matched))

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class FakeUserService:
    def __init__(self, users: list[User]) -> None:
        self._users = {user.id: user for user in users}

    def find_user(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    def get_user(self, user_id: UUID) -> User:
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def has_user(self, user_id: UUID) -> bool:
        return user_id in self._users


class FakeSessionService:
    """Every user's token is 'token-<first name lowercased>'."""

    def __init__(self, users: list[User]) -> None:
        self._tokens = {AuthToken(f"token-{user.first_name.lower()}"): user for user in users}

    async def get_authenticated_user(self, auth_token: AuthToken) -> User:
        if auth_token not in self._tokens:
            raise AuthenticationError("Invalid or expired session")
        return self._tokens[auth_token]

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return auth_token in self._tokens


class FakeTaskService:
    """In-memory task store with the same append contract as TaskService."""

    def __init__(self, tasks: list[Task]) -> None:
        self.tasks = {task.id: task for task in tasks}
        self.fail_appends = False
        self.append_calls = 0

    async def find_task(self, task_id: UUID) -> Task | None:
        task = self.tasks.get(task_id)
        return task.model_copy(deep=True) if task else None

    async def get_task(self, task_id: UUID) -> Task:
        task = await self.find_task(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def append_comment(self, task_id: UUID, content: str, author_id: UUID) -> TaskComment | None:
        self.append_calls += 1
        task = self.tasks.get(task_id)
        if task is None or self.fail_appends:
            return None
        comment = TaskComment(content=content, author=author_id)
        task.comments.append(comment)
        return comment.model_copy(deep=True)

    async def append_reply(self, task_id: UUID, parent_comment_id: UUID, content: str, author_id: UUID) -> TaskReply | None:
        self.append_calls += 1
        task = self.tasks.get(task_id)
        if task is None or self.fail_appends:
            return None
        parent = task.get_comment(parent_comment_id)
        if parent is None:
            return None
        reply = TaskReply(content=content, author=author_id, parent_comment_id=parent_comment_id)
        parent.replies.append(reply)
        return reply.model_copy(deep=True)


def make_user(user_id: UUID, first_name: str, role: UserRole, **kwargs: Any) -> User:
    return User(
        id=user_id,
        email=f"{first_name.lower()}@example.com",
        first_name=first_name,
        last_name="Tester",
        role=role,
        password_hash="$2b$12$hashed_password_here",
        **kwargs,
    )


@pytest.fixture
def config():
    return Config(
        database_url="mongodb://localhost:27017/taskboard_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        frontend_url="http://localhost:3000",
        telegram_bot_token=None,
    )


@pytest.fixture
def users():
    """Admin, team leader, manager and two members."""
    return [
        make_user(ADMIN_ID, "Ada", UserRole.ADMIN),
        make_user(LEADER_ID, "Lea", UserRole.TEAM_LEADER, avatar="/avatars/lea.png"),
        make_user(MANAGER_ID, "Max", UserRole.MANAGER),
        make_user(MEMBER_ID, "Mia", UserRole.MEMBER),
        make_user(OUTSIDER_ID, "Otto", UserRole.MEMBER),
    ]


@pytest.fixture
def task():
    """Task created by the team leader and assigned to the member."""
    return Task(id=TASK_ID, title="Write release notes", created_by=LEADER_ID, assigned_to=MEMBER_ID)


@pytest.fixture
def core(config, users, task):
    """Core stand-in wiring the real access, comment and notification services to in-memory collaborators."""
    database = FakeDatabase()
    services = SimpleNamespace(
        user=FakeUserService(users),
        session=FakeSessionService(users),
        task=FakeTaskService([task]),
        access=AccessService(MagicMock()),
        comment=CommentService(MagicMock()),
        notification=NotificationService(database),
    )
    core = SimpleNamespace(config=config, services=services, database=database)
    for service in (services.access, services.comment, services.notification):
        service.set_core(core)
    return core


@pytest.fixture
def notifications(core) -> FakeCollection:
    """The notifications collection behind the notification service."""
    return core.database.get_collection("notifications")


@pytest.fixture
def app(core, config, monkeypatch):
    monkeypatch.setattr("taskboard.app.Core", lambda _config: core)
    return App(config)
