"""
In-process user store for local development and tests
"""

import asyncio
import copy
import logging
from typing import Any, Dict, Optional

from bson import ObjectId

from database.user_store import UserStore, InsertResult, UpdateResult, DeleteResult

logger = logging.getLogger(__name__)


class InMemoryUserStore(UserStore):
    """
    UserStore that keeps documents in an insertion-ordered dict.

    Lookups return the earliest inserted match, mirroring a collection scan
    without an explicit sort. Returned documents are copies.
    """

    def __init__(self):
        self._documents: Dict[ObjectId, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    def _first_match(self, filters: Dict[str, Any]) -> Optional[ObjectId]:
        for doc_id, document in self._documents.items():
            if all(document.get(field) == value for field, value in filters.items()):
                return doc_id
        return None

    async def insert_one(self, document: Dict[str, Any]) -> InsertResult:
        async with self._lock:
            doc = copy.deepcopy(document)
            doc_id = doc.setdefault("_id", ObjectId())
            if doc_id in self._documents:
                raise ValueError(f"Duplicate _id: {doc_id}")
            self._documents[doc_id] = doc
        return InsertResult(inserted_id=doc_id, acknowledged=True)

    async def find_one(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc_id = self._first_match(filters)
        if doc_id is None:
            return None
        return copy.deepcopy(self._documents[doc_id])

    async def update_one(self, filters: Dict[str, Any], values: Dict[str, Any]) -> UpdateResult:
        async with self._lock:
            doc_id = self._first_match(filters)
            if doc_id is None:
                return UpdateResult(matched_count=0, modified_count=0)

            document = self._documents[doc_id]
            modified = any(document.get(field) != value for field, value in values.items())
            document.update(copy.deepcopy(values))
        return UpdateResult(matched_count=1, modified_count=1 if modified else 0)

    async def find_one_and_update(
        self, filters: Dict[str, Any], values: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        async with self._lock:
            doc_id = self._first_match(filters)
            if doc_id is None:
                return None
            self._documents[doc_id].update(copy.deepcopy(values))
            return copy.deepcopy(self._documents[doc_id])

    async def find_one_and_delete(self, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        async with self._lock:
            doc_id = self._first_match(filters)
            if doc_id is None:
                return None
            return self._documents.pop(doc_id)

    async def delete_one(self, filters: Dict[str, Any]) -> DeleteResult:
        async with self._lock:
            doc_id = self._first_match(filters)
            if doc_id is None:
                return DeleteResult(deleted_count=0)
            del self._documents[doc_id]
        return DeleteResult(deleted_count=1)

    async def count_documents(self, filters: Optional[Dict[str, Any]] = None) -> int:
        filters = filters or {}
        return sum(
            1 for document in self._documents.values()
            if all(document.get(field) == value for field, value in filters.items())
        )

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        self._documents.clear()
        logger.info("In-memory user store cleared")
