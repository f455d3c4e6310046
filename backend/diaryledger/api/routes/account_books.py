"""
Account book routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from diaryledger.db.session import get_db
from diaryledger.schemas.account_book import (
    AccountBookCreate, AccountBookUpdate, AccountBookResponse
)
from diaryledger.models.user import User
from diaryledger.api.dependencies import get_current_user
from diaryledger.services import account_book_service

router = APIRouter(prefix="/account-books", tags=["account-books"])


@router.post("", response_model=AccountBookResponse, status_code=status.HTTP_201_CREATED)
async def create_account_book(
    book_data: AccountBookCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an account book; the creator becomes its administrator."""
    return account_book_service.create_account_book(db, current_user.id, book_data.name)


@router.get("", response_model=List[AccountBookResponse])
async def list_account_books(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List account books shared with the current user."""
    return account_book_service.list_account_books(db, current_user.id)


@router.get("/{book_id}", response_model=AccountBookResponse)
async def get_account_book(
    book_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get an account book."""
    return account_book_service.get_account_book(db, book_id, current_user.id)


@router.put("/{book_id}", response_model=AccountBookResponse)
async def rename_account_book(
    book_id: str,
    book_data: AccountBookUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rename an account book (administrator only)."""
    return account_book_service.rename_account_book(db, book_id, current_user.id, book_data.name)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account_book(
    book_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an account book with all its bills (administrator only)."""
    account_book_service.delete_account_book(db, book_id, current_user.id)
