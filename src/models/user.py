"""
User-related Pydantic models
"""

from typing import Optional
from pydantic import BaseModel, Field


class UserData(BaseModel):
    id: str = Field(..., description="Store-assigned identifier (24 hex characters)")
    name: str


class UserNameRequest(BaseModel):
    """Request body carrying a user name; presence is checked by the service"""
    name: Optional[str] = None


class UserMessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    """Response model for operations that return the affected user"""
    message: str
    user: UserData
