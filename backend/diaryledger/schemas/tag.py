"""
Pydantic schemas for Tag entity.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from diaryledger.models.tag import TagCategory


class TagBase(BaseModel):
    """Base tag schema."""
    tag_name: str = Field(min_length=1, max_length=100)
    type: str = ""
    category: TagCategory


class TagCreate(TagBase):
    """Schema for tag creation."""
    pass


class TagUpdate(TagBase):
    """Schema for tag update."""
    pass


class TagResponse(BaseModel):
    """Schema for tag response."""
    id: str
    tag_name: str
    type: str
    category: str
    created_at: datetime

    class Config:
        from_attributes = True
