"""
Diary media routes for image and video links.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from diaryledger.db.session import get_db
from diaryledger.schemas.diary import (
    DiaryImageResponse, DiaryVideoResponse, ImageCreate, VideoCreate
)
from diaryledger.models.user import User
from diaryledger.api.dependencies import get_current_user
from diaryledger.services import media_service

router = APIRouter(prefix="/diaries", tags=["diary-media"])


@router.post("/{diary_id}/images", response_model=DiaryImageResponse, status_code=status.HTTP_201_CREATED)
async def add_image(
    diary_id: str,
    image_data: ImageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Attach an image URL to a diary."""
    return media_service.add_image(db, diary_id, current_user.id, image_data.image_url)


@router.get("/{diary_id}/images", response_model=List[DiaryImageResponse])
async def list_images(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List a diary's images."""
    return media_service.list_images(db, diary_id, current_user.id)


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    image_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove an image from its diary."""
    media_service.delete_image(db, image_id, current_user.id)


@router.post("/{diary_id}/videos", response_model=DiaryVideoResponse, status_code=status.HTTP_201_CREATED)
async def add_video(
    diary_id: str,
    video_data: VideoCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Attach a video URL to a diary."""
    return media_service.add_video(db, diary_id, current_user.id, video_data.video_url)


@router.get("/{diary_id}/videos", response_model=List[DiaryVideoResponse])
async def list_videos(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List a diary's videos."""
    return media_service.list_videos(db, diary_id, current_user.id)


@router.delete("/videos/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_video(
    video_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a video from its diary."""
    media_service.delete_video(db, video_id, current_user.id)
