"""
Diary routes: CRUD, likes and sharing.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from diaryledger.db.session import get_db
from diaryledger.schemas.diary import (
    DiaryCreate, DiaryUpdate, DiaryResponse, DiaryDetailResponse,
    DiaryMemberResponse, DiaryShare, LikeStatusResponse
)
from diaryledger.schemas.common import MessageResponse, PagedResponse
from diaryledger.models.user import User
from diaryledger.models.permission import PermissionLevel
from diaryledger.api.dependencies import get_current_user
from diaryledger.core.utils import format_response, normalize_pagination
from diaryledger.services import diary_service, permission_service
from diaryledger.services.exceptions import AlreadyGrantedError

router = APIRouter(prefix="/diaries", tags=["diaries"])


def _like_status(diary, liked: bool) -> dict:
    return {"diary_id": diary.id, "liked": liked, "like_count": diary.like_count}


@router.post("", response_model=DiaryResponse, status_code=status.HTTP_201_CREATED)
async def create_diary(
    diary_data: DiaryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a diary entry."""
    return diary_service.create_diary(
        db,
        current_user.id,
        title=diary_data.title,
        content=diary_data.content,
        address=diary_data.address,
        permission_level=diary_data.permission.value,
        tag_ids=diary_data.tag_ids,
        image_urls=diary_data.image_urls,
        video_urls=diary_data.video_urls
    )


@router.get("", response_model=PagedResponse[DiaryResponse])
async def list_diaries(
    page: int = Query(1),
    page_size: int = Query(10),
    keyword: Optional[str] = None,
    tag_ids: List[str] = Query([]),
    permission: Optional[PermissionLevel] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the current user's diaries, newest first."""
    page, page_size = normalize_pagination(page, page_size)
    diaries, total = diary_service.list_diaries(
        db,
        current_user.id,
        page=page,
        page_size=page_size,
        keyword=keyword,
        tag_ids=tag_ids,
        permission_level=permission.value if permission else None
    )
    return {"list": diaries, "total": total, "page": page, "page_size": page_size}


@router.get("/{diary_id}", response_model=DiaryDetailResponse)
async def get_diary(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a diary with tags, permission and media. Counts a page view."""
    return diary_service.get_diary_details(db, diary_id, current_user.id)


@router.put("/{diary_id}", response_model=DiaryResponse)
async def update_diary(
    diary_id: str,
    diary_data: DiaryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a diary. List fields, when sent, replace the whole collection."""
    fields = diary_data.model_dump(include={"title", "content", "address"}, exclude_unset=True)
    return diary_service.update_diary(
        db,
        diary_id,
        current_user.id,
        fields=fields,
        permission_level=diary_data.permission.value if diary_data.permission else None,
        tag_ids=diary_data.tag_ids,
        image_urls=diary_data.image_urls,
        video_urls=diary_data.video_urls
    )


@router.delete("/{diary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_diary(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a diary (creator only)."""
    diary_service.delete_diary(db, diary_id, current_user.id)


# Likes

@router.post("/{diary_id}/like", response_model=LikeStatusResponse)
async def like_diary(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Like a diary."""
    diary = diary_service.like_diary(db, diary_id, current_user.id)
    return _like_status(diary, True)


@router.delete("/{diary_id}/like", response_model=LikeStatusResponse)
async def unlike_diary(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Withdraw a like."""
    diary = diary_service.unlike_diary(db, diary_id, current_user.id)
    return _like_status(diary, False)


@router.get("/{diary_id}/liked", response_model=LikeStatusResponse)
async def check_liked(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Tell whether the current user has liked the diary."""
    diary = permission_service.get_diary_or_404(db, diary_id)
    return _like_status(diary, diary_service.check_liked(db, diary_id, current_user.id))


# Sharing

@router.post("/{diary_id}/share", response_model=MessageResponse)
async def share_diary(
    diary_id: str,
    share_data: DiaryShare,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Share a diary with another user. Any associated user may share."""
    try:
        link = permission_service.share_diary(db, diary_id, current_user.id, share_data.user_id)
    except AlreadyGrantedError as e:
        return format_response({"user_id": share_data.user_id}, message=e.message)
    return format_response({"user_id": link.user_id}, message="Diary shared")


@router.get("/{diary_id}/users", response_model=List[DiaryMemberResponse])
async def list_members(
    diary_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List users associated with the diary, creator first."""
    links = permission_service.list_diary_users(db, diary_id, current_user.id)
    creator_id = links[0].user_id if links else None
    return [
        {
            "user_id": link.user_id,
            "username": link.user.username,
            "is_creator": link.user_id == creator_id,
            "joined_at": link.created_at
        }
        for link in links
    ]
