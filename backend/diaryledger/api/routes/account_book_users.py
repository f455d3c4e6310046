"""
Account book membership routes: list, grant and revoke access.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from diaryledger.db.session import get_db
from diaryledger.schemas.account_book import AccountBookMemberResponse, GrantAccess
from diaryledger.schemas.common import MessageResponse
from diaryledger.models.user import User
from diaryledger.api.dependencies import get_current_user
from diaryledger.core.utils import format_response
from diaryledger.services import permission_service
from diaryledger.services.exceptions import AlreadyGrantedError

router = APIRouter(prefix="/account-books/{book_id}/users", tags=["account-books"])


@router.get("", response_model=List[AccountBookMemberResponse])
async def list_members(
    book_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List users with access to the account book, administrator first."""
    links = permission_service.list_book_users(db, book_id, current_user.id)
    admin_id = links[0].user_id if links else None
    return [
        {
            "user_id": link.user_id,
            "username": link.user.username,
            "is_admin": link.user_id == admin_id,
            "joined_at": link.created_at
        }
        for link in links
    ]


@router.post("", response_model=MessageResponse)
async def grant_access(
    grant_data: GrantAccess,
    book_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Grant a user access to the account book (administrator only)."""
    try:
        link = permission_service.grant_book_access(db, book_id, current_user.id, grant_data.user_id)
    except AlreadyGrantedError as e:
        return format_response({"user_id": grant_data.user_id}, message=e.message)
    return format_response({"user_id": link.user_id}, message="Access granted")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_access(
    book_id: str,
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Revoke a user's access to the account book (administrator only)."""
    permission_service.revoke_book_access(db, book_id, current_user.id, user_id)
