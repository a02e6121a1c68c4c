"""
Document store contract for user records and its MongoDB implementation
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from bson import ObjectId
from pymongo import ReturnDocument

logger = logging.getLogger(__name__)


@dataclass
class InsertResult:
    """Outcome of an insert-one call"""
    inserted_id: Any
    acknowledged: bool = True


@dataclass
class UpdateResult:
    """Outcome of an update-one call"""
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    """Outcome of a delete-one call"""
    deleted_count: int


class UserStore(ABC):
    """
    Collection of user documents keyed by ``_id``.

    Filters are field-equality dictionaries; update values are the fields
    to set on the matched document.
    """

    def is_valid_id(self, value: Any) -> bool:
        """Check that value is a string the store accepts as an identifier"""
        return isinstance(value, str) and ObjectId.is_valid(value)

    def to_id(self, value: str) -> ObjectId:
        return ObjectId(value)

    @abstractmethod
    async def insert_one(self, document: Dict[str, Any]) -> InsertResult:
        ...

    @abstractmethod
    async def find_one(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def update_one(self, filters: Dict[str, Any], values: Dict[str, Any]) -> UpdateResult:
        ...

    @abstractmethod
    async def find_one_and_update(
        self, filters: Dict[str, Any], values: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update the first match and return it as it is after the update"""

    @abstractmethod
    async def find_one_and_delete(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Delete the first match and return it as it was before the delete"""

    @abstractmethod
    async def delete_one(self, filters: Dict[str, Any]) -> DeleteResult:
        ...

    @abstractmethod
    async def count_documents(self, filters: Optional[Dict[str, Any]] = None) -> int:
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the store cannot be reached"""

    @abstractmethod
    async def close(self) -> None:
        ...


class MongoUserStore(UserStore):
    """UserStore backed by a pymongo async collection"""

    def __init__(self, collection, client=None):
        self.collection = collection
        self.client = client

    async def insert_one(self, document: Dict[str, Any]) -> InsertResult:
        result = await self.collection.insert_one(dict(document))
        return InsertResult(inserted_id=result.inserted_id, acknowledged=result.acknowledged)

    async def find_one(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one(filters)

    async def update_one(self, filters: Dict[str, Any], values: Dict[str, Any]) -> UpdateResult:
        result = await self.collection.update_one(filters, {"$set": values})
        return UpdateResult(matched_count=result.matched_count, modified_count=result.modified_count)

    async def find_one_and_update(
        self, filters: Dict[str, Any], values: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one_and_update(
            filters,
            {"$set": values},
            return_document=ReturnDocument.AFTER
        )

    async def find_one_and_delete(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one_and_delete(filters)

    async def delete_one(self, filters: Dict[str, Any]) -> DeleteResult:
        result = await self.collection.delete_one(filters)
        return DeleteResult(deleted_count=result.deleted_count)

    async def count_documents(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(filters or {})

    async def ping(self) -> None:
        if self.client is not None:
            await self.client.admin.command("ping")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
            logger.info("MongoDB client closed")
