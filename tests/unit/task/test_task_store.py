"""Tests for comment writes against the tasks collection."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from taskboard.core.modules.task.models import Task, TaskComment, TaskReply
from taskboard.core.modules.task.service import TaskService
from taskboard.errors import NotFoundError, ValidationError

TASK_ID = uuid4()
AUTHOR_ID = uuid4()


@pytest.fixture
def collection():
    collection = MagicMock()
    collection.update_one = AsyncMock(return_value=SimpleNamespace(modified_count=1))
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    return collection


@pytest.fixture
def activity():
    return SimpleNamespace(log_activity=AsyncMock())


@pytest.fixture
def service(collection, activity):
    database = MagicMock()
    database.get_collection.return_value = collection
    service = TaskService(database)
    user = SimpleNamespace(has_user=lambda user_id: user_id == AUTHOR_ID)
    service.set_core(SimpleNamespace(services=SimpleNamespace(activity=activity, user=user)))
    return service


class TestAppendComment:
    async def test_pushes_top_level_node(self, service, collection, activity):
        """Test that the comment is pushed onto the task's top-level list in one update."""
        comment = await service.append_comment(TASK_ID, "Looks good", AUTHOR_ID)

        assert isinstance(comment, TaskComment)
        assert comment.replies == []
        query, update = collection.update_one.await_args.args
        assert query == {"_id": TASK_ID}
        pushed = update["$push"]["comments"]
        assert pushed["_id"] == comment.id
        assert pushed["content"] == "Looks good"
        assert pushed["author"] == AUTHOR_ID
        assert pushed["replies"] == []
        assert "updated_at" in update["$set"]
        activity.log_activity.assert_awaited_once_with(
            AUTHOR_ID, "add_comment", "task", TASK_ID, {"comment": "Looks good"}
        )

    async def test_unmodified_task_returns_none(self, service, collection, activity):
        """Test that a write touching no document reports failure and logs no activity."""
        collection.update_one.return_value = SimpleNamespace(modified_count=0)

        assert await service.append_comment(TASK_ID, "Looks good", AUTHOR_ID) is None
        activity.log_activity.assert_not_awaited()


class TestAppendReply:
    async def test_pushes_under_matched_parent(self, service, collection, activity):
        """Test that the reply is pushed into the replies of the matched top-level comment."""
        parent_id = uuid4()

        reply = await service.append_reply(TASK_ID, parent_id, "Thanks", AUTHOR_ID)

        assert isinstance(reply, TaskReply)
        assert reply.parent_comment_id == parent_id
        query, update = collection.update_one.await_args.args
        assert query == {"_id": TASK_ID, "comments._id": parent_id}
        pushed = update["$push"]["comments.$.replies"]
        assert pushed["_id"] == reply.id
        assert pushed["parent_comment_id"] == parent_id
        assert "replies" not in pushed
        activity.log_activity.assert_awaited_once()
        assert activity.log_activity.await_args.args[1] == "add_reply"

    async def test_missing_parent_returns_none(self, service, collection, activity):
        """Test that an unmatched parent leaves the task unchanged and returns None."""
        collection.update_one.return_value = SimpleNamespace(modified_count=0)

        assert await service.append_reply(TASK_ID, uuid4(), "Thanks", AUTHOR_ID) is None
        activity.log_activity.assert_not_awaited()


class TestGetTask:
    async def test_missing_task_raises(self, service):
        """Test that an unknown task id raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Task not found"):
            await service.get_task(TASK_ID)

    async def test_loads_comment_tree(self, service, collection):
        """Test that a stored document is parsed into the comment tree."""
        comment_id, reply_id = uuid4(), uuid4()
        collection.find_one.return_value = {
            "_id": TASK_ID,
            "title": "Write release notes",
            "comments": [
                {
                    "_id": comment_id,
                    "content": "Top",
                    "author": AUTHOR_ID,
                    "replies": [
                        {"_id": reply_id, "content": "Reply", "author": AUTHOR_ID, "parent_comment_id": comment_id}
                    ],
                }
            ],
        }

        task = await service.get_task(TASK_ID)

        assert isinstance(task, Task)
        assert task.get_comment(comment_id).replies[0].id == reply_id
        assert task.get_comment(reply_id) is None


class TestCreateTask:
    async def test_blank_title_rejected(self, service, collection):
        """Test that a task needs a title."""
        with pytest.raises(ValidationError, match="Task title is required"):
            await service.create_task("  ", "", None, AUTHOR_ID)

        collection.insert_one.assert_not_awaited()

    async def test_unknown_assignee_rejected(self, service, collection):
        """Test that tasks can only be assigned to existing users."""
        with pytest.raises(ValidationError):
            await service.create_task("Release", "", uuid4(), AUTHOR_ID)

        collection.insert_one.assert_not_awaited()
