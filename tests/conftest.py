"""
pytest configuration and fixtures for the Users API test suite
Every test gets a fresh in-memory store; HTTP tests drive the ASGI app directly.
"""

import os

os.environ.setdefault("ENV", "TEST")

import httpx
import pytest
import pytest_asyncio

from app import create_app
from database.memory_store import InMemoryUserStore
from services.users_service import UsersService

MISSING_USER_ID = "60d5f4813d4f3f2d4c9b53e7"


@pytest.fixture
def user_store():
    """Empty in-memory user store"""
    return InMemoryUserStore()


@pytest.fixture
def users_service(user_store):
    return UsersService(user_store)


@pytest.fixture
def api_app(user_store):
    """Application wired to the test store"""
    return create_app(store=user_store)


@pytest_asyncio.fixture
async def api_client(api_app):
    """Async HTTP client bound to the application"""
    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def john_doe(user_store):
    """A stored user named John Doe; returns its id as a string"""
    result = await user_store.insert_one({"name": "John Doe"})
    return str(result.inserted_id)
