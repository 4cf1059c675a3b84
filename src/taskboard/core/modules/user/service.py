from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskboard.core.core import Service
from taskboard.core.modules.user.models import User, UserRole
from taskboard.core.modules.user.validators import normalize_email, validate_password
from taskboard.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


class UserService(Service):
    """User directory backed by an in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def find_user(self, user_id: UUID) -> User | None:
        """Get user by ID, or None if the user is unknown."""
        return self._users.get(user_id)

    def find_user_by_email(self, email: str) -> User | None:
        email = email.strip().lower()
        return next((u for u in self._users.values() if u.email == email), None)

    def get_user_by_email(self, email: str) -> User:
        """Get user by email from cache."""
        user = self.find_user_by_email(email)
        if user is None:
            raise NotFoundError(f"User '{email}' not found")
        return user

    def has_user(self, user_id: UUID) -> bool:
        return user_id in self._users

    def has_email(self, email: str) -> bool:
        return self.find_user_by_email(email) is not None

    def get_all_users(self) -> list[User]:
        """Get all users from cache."""
        return list(self._users.values())

    async def create_user(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.MEMBER,
        avatar: str | None = None,
    ) -> User:
        """Create user with hashed password."""
        email = normalize_email(email)
        if self.has_email(email):
            raise ValidationError(f"User '{email}' already exists")

        validate_password(password)
        user = User(
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            role=role,
            avatar=avatar,
            password_hash=hash_password(password),
        )
        res = await self._collection.insert_one(user.to_mongo())
        logger.info("user_created", user_id=res.inserted_id, role=role)
        return await self.update_user_cache(res.inserted_id)

    def verify_password(self, email: str, password: str) -> bool:
        """Verify password against stored hash. Inactive users never verify."""
        user = self.find_user_by_email(email)
        if user is None or not user.is_active:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), user.password_hash.encode("utf-8"))

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """Change user password after verifying current password."""
        user = self.get_user(user_id)
        if not bcrypt.checkpw(old_password.encode("utf-8"), user.password_hash.encode("utf-8")):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": hash_password(new_password)}})
        await self.update_user_cache(user_id)

    async def set_telegram_chat_id(self, user_id: UUID, chat_id: str | None) -> User:
        """Link (or unlink with None) a Telegram chat for notification mirroring."""
        self.get_user(user_id)
        await self._collection.update_one({"_id": user_id}, {"$set": {"telegram_chat_id": chat_id or None}})
        return await self.update_user_cache(user_id)

    async def ensure_admin_user_exists(self) -> None:
        """Create the bootstrap admin user if no admin exists."""
        if any(user.role == UserRole.ADMIN for user in self._users.values()):
            return
        config = self.core.config
        await self.create_user(config.admin_email, config.admin_password, "System", "Admin", UserRole.ADMIN)

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        user = User.from_mongo(await self._collection.find_one({"_id": user_id}))
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = user
        return user

    async def on_start(self) -> None:
        """Initialize indexes, cache, and admin user."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self.update_all_users_cache()
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started", user_count=len(self._users))
