"""Pydantic bases for documents stored in MongoDB.

Ids are UUIDs (the client uses uuidRepresentation="standard") kept under
`_id` in the database and exposed as `id` in Python.
"""

from typing import Any, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor


class EmbeddedDocument(BaseModel):
    """Sub-document with its own `_id`, stored inside a parent document's array."""

    id: UUID = Field(alias="_id", default_factory=uuid4)

    model_config = ConfigDict(populate_by_name=True)

    def to_mongo(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class MongoModel(EmbeddedDocument):
    """Top-level document of a collection."""

    model_config = ConfigDict(populate_by_name=True, json_schema_serialization_defaults_required=True)

    @classmethod
    def from_mongo(cls, doc: dict[str, Any] | None) -> Self | None:
        return None if doc is None else cls.model_validate(doc)

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        return [cls.model_validate(doc) async for doc in cursor]
