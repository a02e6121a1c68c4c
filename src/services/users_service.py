"""
Users service - create/read/update/delete over the users collection
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Request

from database.user_store import UserStore
from services.errors import ValidationError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

NAME_REQUIRED = "Name is required"
INVALID_USER_ID = "Invalid user ID"
USER_NOT_FOUND = "User not found"


def _is_name(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def serialize_user(document: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a stored user document into its JSON shape"""
    return {
        "id": str(document["_id"]),
        "name": document.get("name")
    }


class UsersService:
    """Service for user operations; every method issues a single store call"""

    def __init__(self, store: UserStore):
        self.store = store

    async def _call_store(self, operation: str, coro):
        try:
            return await coro
        except Exception as e:
            logger.error(f"Store operation {operation} failed for users: {e}", exc_info=True)
            raise StoreError(f"Store operation {operation} failed") from e

    def _require_id(self, user_id: Any):
        if not self.store.is_valid_id(user_id):
            raise ValidationError(INVALID_USER_ID)
        return self.store.to_id(user_id)

    async def create_user(self, name: Optional[str]) -> Dict[str, Any]:
        """
        Create a new user

        Args:
            name: Name of the user

        Returns:
            The created user's id and name
        """
        if not name:
            raise ValidationError(NAME_REQUIRED)

        result = await self._call_store("insert_one", self.store.insert_one({"name": name}))
        if not result.acknowledged:
            raise StoreError("Insert was not acknowledged", public_message="Failed to create user")

        logger.info(f"Created user {result.inserted_id}")
        return serialize_user({"_id": result.inserted_id, "name": name})

    async def get_user_by_name(self, name: Any) -> Dict[str, Any]:
        """Get the first user whose name matches exactly"""
        if not _is_name(name):
            raise ValidationError(NAME_REQUIRED)

        user = await self._call_store("find_one", self.store.find_one({"name": name}))
        if not user:
            raise NotFoundError(USER_NOT_FOUND)
        return serialize_user(user)

    async def get_user_by_id(self, user_id: str) -> Dict[str, Any]:
        """Get a user by id"""
        object_id = self._require_id(user_id)

        user = await self._call_store("find_one", self.store.find_one({"_id": object_id}))
        if not user:
            raise NotFoundError(USER_NOT_FOUND)
        return serialize_user(user)

    async def update_user_by_name(self, old_name: Any, new_name: Optional[str]) -> None:
        """
        Rename the first user matching old_name

        Args:
            old_name: Current name of the user
            new_name: Name to set
        """
        if not _is_name(old_name) or not _is_name(new_name):
            raise ValidationError("Both old name (query) and new name (body) are required")

        result = await self._call_store(
            "update_one",
            self.store.update_one({"name": old_name}, {"name": new_name})
        )
        if result.matched_count == 0:
            raise NotFoundError(USER_NOT_FOUND)

        logger.info(f"Renamed user {old_name!r} to {new_name!r}")

    async def update_user_by_id(self, user_id: str, new_name: Optional[str]) -> Dict[str, Any]:
        """
        Rename a user by id and return the updated record

        The lookup and the update are one atomic find-and-update call, so a
        missing record is reported from its result.
        """
        object_id = self._require_id(user_id)
        if not new_name:
            raise ValidationError(NAME_REQUIRED)

        user = await self._call_store(
            "find_one_and_update",
            self.store.find_one_and_update({"_id": object_id}, {"name": new_name})
        )
        if not user:
            raise NotFoundError(USER_NOT_FOUND)

        logger.info(f"Updated user {user_id!r}")
        return serialize_user(user)

    async def delete_user_by_id(self, user_id: str) -> Dict[str, Any]:
        """Delete a user by id and return the record as it was"""
        object_id = self._require_id(user_id)

        user = await self._call_store(
            "find_one_and_delete",
            self.store.find_one_and_delete({"_id": object_id})
        )
        if not user:
            raise NotFoundError(USER_NOT_FOUND)

        logger.info(f"Deleted user {user_id!r}")
        return serialize_user(user)

    async def delete_user_by_name(self, name: Any) -> None:
        """Delete the first user whose name matches exactly"""
        if not _is_name(name):
            raise ValidationError("Name query parameter is required")

        result = await self._call_store("delete_one", self.store.delete_one({"name": name}))
        if result.deleted_count == 0:
            raise NotFoundError(USER_NOT_FOUND)

        logger.info(f"Deleted user named {name!r}")


def get_users_service(request: Request) -> UsersService:
    """FastAPI dependency building the service around the app's store"""
    return UsersService(request.app.state.user_store)
