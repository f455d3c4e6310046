"""
Account book service for ledger lifecycle.
"""
import logging
from typing import List
from sqlalchemy.orm import Session
from diaryledger.models.account_book import AccountBook, AccountBookUser
from diaryledger.services.permission_service import (
    require_book_access,
    require_book_admin,
)

logger = logging.getLogger(__name__)


def create_account_book(db: Session, user_id: str, name: str) -> AccountBook:
    """Create an account book with its creator as administrator."""
    book = AccountBook(name=name)
    db.add(book)
    db.flush()

    # Add creator as administrator
    db.add(AccountBookUser(account_book_id=book.id, user_id=user_id, is_creator=True))
    db.commit()
    db.refresh(book)

    logger.info("User %s created account book %s", user_id, book.id)
    return book


def list_account_books(db: Session, user_id: str) -> List[AccountBook]:
    """List account books the user is associated with."""
    return db.query(AccountBook).join(
        AccountBookUser, AccountBookUser.account_book_id == AccountBook.id
    ).filter(
        AccountBookUser.user_id == user_id
    ).order_by(AccountBook.created_at.desc(), AccountBook.id).all()


def get_account_book(db: Session, book_id: str, user_id: str) -> AccountBook:
    return require_book_access(db, book_id, user_id)


def rename_account_book(db: Session, book_id: str, user_id: str, name: str) -> AccountBook:
    """Rename an account book. Administrator only."""
    book = require_book_admin(db, book_id, user_id)
    book.name = name
    db.commit()
    db.refresh(book)
    return book


def delete_account_book(db: Session, book_id: str, user_id: str) -> None:
    """Delete an account book with its members and bills. Administrator only."""
    book = require_book_admin(db, book_id, user_id)
    db.delete(book)
    db.commit()
    logger.info("User %s deleted account book %s", user_id, book_id)
