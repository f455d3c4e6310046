"""
Pydantic schemas for diary permission levels.
"""
from pydantic import BaseModel


class PermissionResponse(BaseModel):
    """Schema for permission level response."""
    id: str
    name: str

    class Config:
        from_attributes = True
