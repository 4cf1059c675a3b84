from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import Field

from taskboard.core.db import MongoModel
from taskboard.core.views import ViewModel
from taskboard.utils import now


class UserRole(StrEnum):
    """Roles, from most to least privileged."""

    ADMIN = "admin"
    MANAGER = "manager"
    TEAM_LEADER = "team_leader"
    MEMBER = "member"
    VIEWER = "viewer"


class User(MongoModel):
    """User domain model with credentials."""

    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.MEMBER
    avatar: str | None = None
    password_hash: str  # bcrypt hash
    telegram_chat_id: str | None = None  # Where notifications are mirrored, if set
    is_active: bool = True
    created_at: datetime = Field(default_factory=now)

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UserView(ViewModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Login email")
    first_name: str
    last_name: str
    role: UserRole
    avatar: str | None = None

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            avatar=user.avatar,
        )
