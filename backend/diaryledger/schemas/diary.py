"""
Pydantic schemas for Diary entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from diaryledger.models.permission import PermissionLevel
from diaryledger.schemas.tag import TagResponse
from diaryledger.schemas.permission import PermissionResponse


class DiaryCreate(BaseModel):
    """Schema for diary creation."""
    title: str = Field(min_length=1, max_length=255)
    content: str
    address: Optional[str] = None
    permission: PermissionLevel = PermissionLevel.PRIVATE
    tag_ids: List[str] = []
    image_urls: List[str] = []
    video_urls: List[str] = []


class DiaryUpdate(BaseModel):
    """Schema for diary update. A null address clears it; list fields, when given, replace the whole collection."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None
    address: Optional[str] = None
    permission: Optional[PermissionLevel] = None
    tag_ids: Optional[List[str]] = None
    image_urls: Optional[List[str]] = None
    video_urls: Optional[List[str]] = None


class DiaryResponse(BaseModel):
    """Schema for diary response."""
    id: str
    title: str
    content: str
    address: Optional[str] = None
    pageview: int
    like_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DiaryImageResponse(BaseModel):
    """Schema for diary image response."""
    id: str
    diary_id: str
    image_url: str
    created_at: datetime

    class Config:
        from_attributes = True


class DiaryVideoResponse(BaseModel):
    """Schema for diary video response."""
    id: str
    diary_id: str
    video_url: str
    created_at: datetime

    class Config:
        from_attributes = True


class DiaryDetailResponse(BaseModel):
    """Schema for detailed diary response with tags, permission and media."""
    diary: DiaryResponse
    tags: List[TagResponse] = []
    permission: Optional[PermissionResponse] = None
    images: List[DiaryImageResponse] = []
    videos: List[DiaryVideoResponse] = []
    liked: bool = False

    class Config:
        from_attributes = True


class DiaryMemberResponse(BaseModel):
    """Schema for diary member response."""
    user_id: str
    username: str
    is_creator: bool
    joined_at: datetime


class DiaryShare(BaseModel):
    """Schema for sharing a diary."""
    user_id: str


class LikeStatusResponse(BaseModel):
    """Schema for like status response."""
    diary_id: str
    liked: bool
    like_count: int


class ImageCreate(BaseModel):
    """Schema for adding an image."""
    image_url: str = Field(min_length=1)


class VideoCreate(BaseModel):
    """Schema for adding a video."""
    video_url: str = Field(min_length=1)
