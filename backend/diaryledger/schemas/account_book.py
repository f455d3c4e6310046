"""
Pydantic schemas for AccountBook entity.
"""
from pydantic import BaseModel, Field
from datetime import datetime


class AccountBookCreate(BaseModel):
    """Schema for account book creation."""
    name: str = Field(min_length=1, max_length=255)


class AccountBookUpdate(BaseModel):
    """Schema for account book rename."""
    name: str = Field(min_length=1, max_length=255)


class AccountBookResponse(BaseModel):
    """Schema for account book response."""
    id: str
    name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AccountBookMemberResponse(BaseModel):
    """Schema for account book member response."""
    user_id: str
    username: str
    is_admin: bool
    joined_at: datetime


class GrantAccess(BaseModel):
    """Schema for granting a user access."""
    user_id: str
