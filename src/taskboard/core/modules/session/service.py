import secrets
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskboard.core.core import Service
from taskboard.core.modules.session.models import AuthToken, Session
from taskboard.core.modules.user.models import User
from taskboard.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Bearer-token sessions, with token lookups cached in memory."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._sessions: dict[AuthToken, Session] = {}

    async def on_start(self) -> None:
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    async def create_session(self, user_id: UUID) -> AuthToken:
        session = Session(user_id=user_id, auth_token=AuthToken(secrets.token_urlsafe(32)))
        await self._collection.insert_one(session.to_mongo())
        self._sessions[session.auth_token] = session
        logger.info("session_created", user_id=user_id)
        return session.auth_token

    async def get_authenticated_user(self, auth_token: AuthToken) -> User:
        """Resolve a token to an active user.

        The user is looked up in the directory on every call, so deactivation
        and role changes take effect immediately.
        """
        session = self._sessions.get(auth_token)
        if session is None:
            session = Session.from_mongo(await self._collection.find_one({"auth_token": auth_token}))
        if session is None or session.is_expired:
            self._sessions.pop(auth_token, None)
            raise AuthenticationError("Invalid or expired session")

        user = self.core.services.user.find_user(session.user_id)
        if user is None or not user.is_active:
            self._sessions.pop(auth_token, None)
            raise AuthenticationError("User not found")

        self._sessions[auth_token] = session
        return user

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_user(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        self._sessions.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})
