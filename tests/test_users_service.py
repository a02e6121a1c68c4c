"""
UsersService behaviour against the in-memory store
"""

import logging
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from database.user_store import InsertResult
from services.errors import ValidationError, NotFoundError, StoreError
from services.users_service import UsersService, serialize_user

from conftest import MISSING_USER_ID


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_create_then_find_by_name(self, users_service):
        created = await users_service.create_user("John Doe")

        assert created["name"] == "John Doe"
        assert ObjectId.is_valid(created["id"])

        found = await users_service.get_user_by_name("John Doe")
        assert found == created

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, ""])
    async def test_missing_name_is_rejected(self, users_service, user_store, name):
        with pytest.raises(ValidationError, match="Name is required"):
            await users_service.create_user(name)

        assert await user_store.count_documents() == 0

    @pytest.mark.asyncio
    async def test_unacknowledged_insert_is_store_error(self, user_store):
        user_store.insert_one = AsyncMock(return_value=InsertResult(inserted_id=None, acknowledged=False))
        service = UsersService(user_store)

        with pytest.raises(StoreError) as exc_info:
            await service.create_user("John Doe")

        assert exc_info.value.public_message == "Failed to create user"


class TestFindUsers:

    @pytest.mark.asyncio
    async def test_find_by_name_is_exact_and_case_sensitive(self, users_service, john_doe):
        with pytest.raises(NotFoundError):
            await users_service.get_user_by_name("john doe")

        with pytest.raises(NotFoundError):
            await users_service.get_user_by_name("John")

    @pytest.mark.asyncio
    async def test_find_by_name_returns_first_match(self, users_service, user_store):
        first = await user_store.insert_one({"name": "Twin"})
        await user_store.insert_one({"name": "Twin"})

        found = await users_service.get_user_by_name("Twin")

        assert found["id"] == str(first.inserted_id)

    @pytest.mark.asyncio
    async def test_find_by_name_requires_name(self, users_service):
        with pytest.raises(ValidationError):
            await users_service.get_user_by_name(None)

    @pytest.mark.asyncio
    async def test_find_by_id(self, users_service, john_doe):
        found = await users_service.get_user_by_id(john_doe)

        assert found == {"id": john_doe, "name": "John Doe"}

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, users_service):
        with pytest.raises(NotFoundError, match="User not found"):
            await users_service.get_user_by_id(MISSING_USER_ID)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["invalid-id", "", "123", "zz5f4813d4f3f2d4c9b53e7z"])
    async def test_invalid_id_rejected_regardless_of_store(self, users_service, john_doe, user_id):
        with pytest.raises(ValidationError, match="Invalid user ID"):
            await users_service.get_user_by_id(user_id)

        with pytest.raises(ValidationError, match="Invalid user ID"):
            await users_service.delete_user_by_id(user_id)


class TestUpdateUsers:

    @pytest.mark.asyncio
    async def test_update_by_name_keeps_id(self, users_service, user_store):
        inserted = await user_store.insert_one({"name": "Old Name"})
        await user_store.insert_one({"name": "Old Name"})

        await users_service.update_user_by_name("Old Name", "New Name")

        renamed = await user_store.find_one({"_id": inserted.inserted_id})
        assert renamed["name"] == "New Name"
        assert await user_store.count_documents({"name": "New Name"}) == 1
        assert await user_store.count_documents({"name": "Old Name"}) == 1

    @pytest.mark.asyncio
    async def test_update_by_name_not_found(self, users_service):
        with pytest.raises(NotFoundError):
            await users_service.update_user_by_name("Nobody", "Somebody")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("old_name,new_name", [(None, "New"), ("Old", None), ("", ""), ("Old", "")])
    async def test_update_by_name_requires_both_names(self, users_service, old_name, new_name):
        with pytest.raises(ValidationError, match="Both old name"):
            await users_service.update_user_by_name(old_name, new_name)

    @pytest.mark.asyncio
    async def test_update_by_id_returns_updated_record(self, users_service, john_doe):
        updated = await users_service.update_user_by_id(john_doe, "Jane Doe")

        assert updated == {"id": john_doe, "name": "Jane Doe"}

    @pytest.mark.asyncio
    async def test_update_by_id_is_single_store_call(self, user_store, john_doe):
        user_store.find_one = AsyncMock(side_effect=AssertionError("no separate existence check"))
        service = UsersService(user_store)

        updated = await service.update_user_by_id(john_doe, "Jane Doe")

        assert updated["name"] == "Jane Doe"
        user_store.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_by_id_missing(self, users_service):
        with pytest.raises(NotFoundError):
            await users_service.update_user_by_id(MISSING_USER_ID, "Jane Doe")

    @pytest.mark.asyncio
    async def test_update_by_id_validation(self, users_service, john_doe):
        with pytest.raises(ValidationError, match="Invalid user ID"):
            await users_service.update_user_by_id("invalid-id", "Jane Doe")

        with pytest.raises(ValidationError, match="Name is required"):
            await users_service.update_user_by_id(john_doe, None)


class TestDeleteUsers:

    @pytest.mark.asyncio
    async def test_delete_by_id_returns_prior_content(self, users_service, user_store, john_doe):
        deleted = await users_service.delete_user_by_id(john_doe)

        assert deleted == {"id": john_doe, "name": "John Doe"}
        assert await user_store.count_documents() == 0

    @pytest.mark.asyncio
    async def test_delete_by_id_missing(self, users_service):
        with pytest.raises(NotFoundError):
            await users_service.delete_user_by_id(MISSING_USER_ID)

    @pytest.mark.asyncio
    async def test_delete_by_name_removes_exactly_one(self, users_service, user_store):
        await user_store.insert_one({"name": "Twin"})
        await user_store.insert_one({"name": "Twin"})

        await users_service.delete_user_by_name("Twin")

        assert await user_store.count_documents() == 1

    @pytest.mark.asyncio
    async def test_delete_by_name_no_match_leaves_store_untouched(self, users_service, user_store, john_doe):
        with pytest.raises(NotFoundError):
            await users_service.delete_user_by_name("Jane Doe")

        assert await user_store.count_documents() == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", 42, ["John Doe"]])
    async def test_delete_by_name_requires_string(self, users_service, name):
        with pytest.raises(ValidationError, match="Name query parameter is required"):
            await users_service.delete_user_by_name(name)

    @pytest.mark.asyncio
    async def test_repeated_delete_is_not_found(self, users_service, john_doe):
        await users_service.delete_user_by_id(john_doe)

        with pytest.raises(NotFoundError):
            await users_service.delete_user_by_id(john_doe)


class TestLogging:

    @pytest.mark.asyncio
    async def test_names_are_logged_escaped(self, users_service, user_store, caplog):
        await user_store.insert_one({"name": "Old\nINFO forged entry"})

        with caplog.at_level(logging.INFO, logger="services.users_service"):
            await users_service.update_user_by_name("Old\nINFO forged entry", "New\nName")
            await users_service.delete_user_by_name("New\nName")

        messages = [record.getMessage() for record in caplog.records if record.name == "services.users_service"]
        assert messages == [
            "Renamed user 'Old\\nINFO forged entry' to 'New\\nName'",
            "Deleted user named 'New\\nName'",
        ]
        assert all("\n" not in message for message in messages)


class TestStoreFailures:

    @pytest.mark.asyncio
    async def test_store_exception_becomes_store_error(self, user_store):
        cause = RuntimeError("connection reset")
        user_store.find_one = AsyncMock(side_effect=cause)
        service = UsersService(user_store)

        with pytest.raises(StoreError) as exc_info:
            await service.get_user_by_name("John Doe")

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.public_message == "An unexpected error occurred"
        assert user_store.find_one.await_count == 1


def test_serialize_user_stringifies_id():
    object_id = ObjectId()

    assert serialize_user({"_id": object_id, "name": "John Doe"}) == {"id": str(object_id), "name": "John Doe"}
