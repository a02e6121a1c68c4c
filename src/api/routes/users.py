"""
User API routes
All data access goes through UsersService; error kinds raised there are
rendered by the centralized error handlers.
"""

import logging
from typing import List, Optional, Union
from fastapi import APIRouter, Depends, Query

from models.user import UserData, UserNameRequest, UserMessageResponse, UserResponse
from services.users_service import UsersService, get_users_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _query_value(values: Optional[List[str]]) -> Union[str, List[str], None]:
    """Collapse a query parameter; repeated values stay a list so the service rejects them"""
    if not values:
        return None
    return values[0] if len(values) == 1 else values


@router.post("", status_code=201, response_model=UserResponse)
async def create_user(
    request: Optional[UserNameRequest] = None,
    users_service: UsersService = Depends(get_users_service)
):
    """Create a new user"""
    user = await users_service.create_user(request.name if request else None)
    return {"message": "User created successfully", "user": user}


@router.get("", response_model=UserData)
async def get_user_by_name(
    name: Optional[List[str]] = Query(None, description="Exact name to look up"),
    users_service: UsersService = Depends(get_users_service)
):
    """Get the first user with the given name"""
    return await users_service.get_user_by_name(_query_value(name))


@router.get("/{user_id}", response_model=UserData)
async def get_user_by_id(
    user_id: str,
    users_service: UsersService = Depends(get_users_service)
):
    """Get user details"""
    return await users_service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user_by_id(
    user_id: str,
    request: Optional[UserNameRequest] = None,
    users_service: UsersService = Depends(get_users_service)
):
    """Rename a user by id"""
    new_name = request.name if request else None
    logger.info(f"Received ID: {user_id!r}, New Name: {new_name!r}")
    user = await users_service.update_user_by_id(user_id, new_name)
    return {"message": "User updated successfully", "user": user}


@router.put("", response_model=UserMessageResponse)
async def update_user_by_name(
    name: Optional[List[str]] = Query(None, description="Current name of the user"),
    request: Optional[UserNameRequest] = None,
    users_service: UsersService = Depends(get_users_service)
):
    """Rename the first user with the given name"""
    await users_service.update_user_by_name(_query_value(name), request.name if request else None)
    return {"message": "User updated successfully"}


@router.delete("", response_model=UserMessageResponse)
async def delete_user_by_name(
    name: Optional[List[str]] = Query(None, description="Exact name of the user to delete"),
    users_service: UsersService = Depends(get_users_service)
):
    """Delete the first user with the given name"""
    await users_service.delete_user_by_name(_query_value(name))
    return {"message": "User deleted successfully"}


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user_by_id(
    user_id: str,
    users_service: UsersService = Depends(get_users_service)
):
    """Delete a user and return the removed record"""
    user = await users_service.delete_user_by_id(user_id)
    return {"message": "User deleted successfully", "user": user}
