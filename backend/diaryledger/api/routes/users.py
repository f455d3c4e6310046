"""
User management routes.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from diaryledger.db.session import get_db
from diaryledger.schemas.common import PagedResponse
from diaryledger.schemas.user import UserResponse, UserUpdate
from diaryledger.models.user import User
from diaryledger.api.dependencies import get_current_user
from diaryledger.core.utils import normalize_pagination
from diaryledger.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user information."""
    return current_user


@router.put("/me", response_model=UserResponse)
async def update_current_user(
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the current user's profile. Omitted fields are left unchanged."""
    return user_service.update_profile(db, current_user.id, user_data.model_dump(exclude_unset=True))


@router.get("", response_model=PagedResponse[UserResponse])
async def search_users(
    keyword: Optional[str] = None,
    page: int = Query(1),
    page_size: int = Query(10),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Search users by username, e.g. to pick someone to share with."""
    page, page_size = normalize_pagination(page, page_size)
    users, total = user_service.list_users(db, page, page_size, keyword)
    return {"list": users, "total": total, "page": page, "page_size": page_size}


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get user by ID."""
    return user_service.get_user(db, user_id)
