"""
Diary permission level routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from diaryledger.db.session import get_db
from diaryledger.schemas.permission import PermissionResponse
from diaryledger.models.user import User
from diaryledger.api.dependencies import get_current_user
from diaryledger.services.diary_service import ensure_permission_levels

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("", response_model=List[PermissionResponse])
async def list_permission_levels(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the diary permission levels."""
    levels = ensure_permission_levels(db)
    db.commit()
    return levels
