from datetime import datetime, timedelta
from typing import NewType
from uuid import UUID

from pydantic import Field

from taskboard.core.db import MongoModel
from taskboard.utils import now

AuthToken = NewType("AuthToken", str)

SESSION_LIFETIME = timedelta(days=30)


class Session(MongoModel):
    """Login session behind an opaque bearer token.

    MongoDB removes the document once `expires_at` has passed (TTL index).
    """

    user_id: UUID
    auth_token: AuthToken
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime = Field(default_factory=lambda: now() + SESSION_LIFETIME)

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= now()
