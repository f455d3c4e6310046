"""
Tag management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from diaryledger.db.session import get_db
from diaryledger.schemas.tag import TagCreate, TagUpdate, TagResponse
from diaryledger.models.user import User
from diaryledger.api.dependencies import get_current_user
from diaryledger.services import tag_service

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=List[TagResponse])
async def list_tags(
    category: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List tags, optionally for one category (bill or diary)."""
    return tag_service.list_tags(db, category)


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a tag."""
    return tag_service.create_tag(db, tag_data.tag_name, tag_data.type, tag_data.category.value)


@router.get("/{tag_id}", response_model=TagResponse)
async def get_tag(
    tag_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a tag by ID."""
    return tag_service.get_tag(db, tag_id)


@router.put("/{tag_id}", response_model=TagResponse)
async def update_tag(
    tag_id: str,
    tag_data: TagUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a tag."""
    return tag_service.update_tag(db, tag_id, tag_data.tag_name, tag_data.type, tag_data.category.value)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a tag that nothing references."""
    tag_service.delete_tag(db, tag_id)
