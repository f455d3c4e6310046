"""
Shared response schemas.
"""
from pydantic import BaseModel
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar("T")


class MessageResponse(BaseModel):
    """Schema for plain message responses."""
    message: str
    data: Optional[Any] = None


class PagedResponse(BaseModel, Generic[T]):
    """Schema for paginated list responses."""
    list: List[T] = []
    total: int
    page: int
    page_size: int
