"""
Sharing and access-control rules for diaries and account books.

Access to both resources is relation-based: a user may touch a diary or an
account book only while an association row links them to it. The creator of
a resource is the holder of its first association (the row flagged
``is_creator``, then the earliest ``created_at``).

Two authority tiers apply:

- diaries: any associated user may edit the diary and share it further;
  only the creator may delete it.
- account books: any associated user may read and record bills; only the
  administrator (the creator) may grant or revoke access, rename or delete.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from diaryledger.models.user import User
from diaryledger.models.diary import Diary, DiaryUser
from diaryledger.models.account_book import AccountBook, AccountBookUser
from diaryledger.services.exceptions import (
    AlreadyGrantedError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def _first_association(db: Session, model, resource_column, resource_id: str):
    return db.query(model).filter(
        resource_column == resource_id
    ).order_by(
        model.is_creator.desc(),
        model.created_at.asc(),
        model.id.asc()
    ).first()


def _get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


# Diaries

def check_diary_access(db: Session, diary_id: str, user_id: str) -> bool:
    """Return True if the user holds an association with the diary."""
    return db.query(DiaryUser.id).filter(
        DiaryUser.diary_id == diary_id,
        DiaryUser.user_id == user_id
    ).first() is not None


def resolve_diary_creator(db: Session, diary_id: str) -> str:
    """Return the user id of the diary's creator."""
    first = _first_association(db, DiaryUser, DiaryUser.diary_id, diary_id)
    if not first:
        raise NotFoundError("Diary not found")
    return first.user_id


def get_diary_or_404(db: Session, diary_id: str) -> Diary:
    diary = db.query(Diary).filter(Diary.id == diary_id).first()
    if not diary:
        raise NotFoundError("Diary not found")
    return diary


def require_diary_access(db: Session, diary_id: str, user_id: str) -> Diary:
    """Return the diary if the user is associated with it."""
    diary = get_diary_or_404(db, diary_id)
    if not check_diary_access(db, diary_id, user_id):
        logger.warning("User %s denied access to diary %s", user_id, diary_id)
        raise ForbiddenError("Access denied to this diary")
    return diary


def grant_diary_access(db: Session, diary_id: str, granter_id: str, grantee_id: str) -> DiaryUser:
    """
    Share a diary with another user.

    Any current associate may share. Raises AlreadyGrantedError when the
    grantee already has access.
    """
    require_diary_access(db, diary_id, granter_id)
    _get_user(db, grantee_id)

    if check_diary_access(db, diary_id, grantee_id):
        raise AlreadyGrantedError("User already has access to this diary")

    link = DiaryUser(diary_id=diary_id, user_id=grantee_id, is_creator=False)
    db.add(link)
    db.commit()
    db.refresh(link)

    logger.info("User %s shared diary %s with user %s", granter_id, diary_id, grantee_id)
    return link


share_diary = grant_diary_access


def list_diary_users(db: Session, diary_id: str, requester_id: str) -> List[DiaryUser]:
    """List association rows of a diary, creator first."""
    require_diary_access(db, diary_id, requester_id)
    return db.query(DiaryUser).filter(
        DiaryUser.diary_id == diary_id
    ).order_by(
        DiaryUser.is_creator.desc(),
        DiaryUser.created_at.asc(),
        DiaryUser.id.asc()
    ).all()


# Account books

def check_book_access(db: Session, book_id: str, user_id: str) -> bool:
    """Return True if the user holds an association with the account book."""
    return db.query(AccountBookUser.id).filter(
        AccountBookUser.account_book_id == book_id,
        AccountBookUser.user_id == user_id
    ).first() is not None


def resolve_book_admin(db: Session, book_id: str) -> str:
    """Return the user id of the account book's administrator."""
    first = _first_association(db, AccountBookUser, AccountBookUser.account_book_id, book_id)
    if not first:
        raise NotFoundError("Account book not found")
    return first.user_id


def get_book_or_404(db: Session, book_id: str) -> AccountBook:
    book = db.query(AccountBook).filter(AccountBook.id == book_id).first()
    if not book:
        raise NotFoundError("Account book not found")
    return book


def require_book_access(db: Session, book_id: str, user_id: str) -> AccountBook:
    """Return the account book if the user is associated with it."""
    book = get_book_or_404(db, book_id)
    if not check_book_access(db, book_id, user_id):
        logger.warning("User %s denied access to account book %s", user_id, book_id)
        raise ForbiddenError("Access denied to this account book")
    return book


def require_book_admin(db: Session, book_id: str, user_id: str) -> AccountBook:
    """Return the account book if the user is its administrator."""
    book = get_book_or_404(db, book_id)
    if resolve_book_admin(db, book_id) != user_id:
        logger.warning("User %s is not the administrator of account book %s", user_id, book_id)
        raise ForbiddenError("Only the account book administrator can do this")
    return book


def grant_book_access(db: Session, book_id: str, granter_id: str, grantee_id: str) -> AccountBookUser:
    """
    Grant a user access to an account book.

    Only the administrator may grant. Raises AlreadyGrantedError when the
    grantee already has access.
    """
    require_book_admin(db, book_id, granter_id)
    _get_user(db, grantee_id)

    if check_book_access(db, book_id, grantee_id):
        raise AlreadyGrantedError("User already has access to this account book")

    link = AccountBookUser(account_book_id=book_id, user_id=grantee_id, is_creator=False)
    db.add(link)
    db.commit()
    db.refresh(link)

    logger.info("User %s granted account book %s to user %s", granter_id, book_id, grantee_id)
    return link


def revoke_book_access(db: Session, book_id: str, requester_id: str, target_user_id: str) -> None:
    """Remove a user's access to an account book. Administrator only."""
    require_book_admin(db, book_id, requester_id)

    if target_user_id == requester_id:
        raise InvalidArgumentError("The administrator cannot revoke their own access")

    link: Optional[AccountBookUser] = db.query(AccountBookUser).filter(
        AccountBookUser.account_book_id == book_id,
        AccountBookUser.user_id == target_user_id
    ).first()
    if not link:
        raise NotFoundError("User has no access to this account book")

    db.delete(link)
    db.commit()

    logger.info("User %s revoked account book %s from user %s", requester_id, book_id, target_user_id)


def list_book_users(db: Session, book_id: str, requester_id: str) -> List[AccountBookUser]:
    """List association rows of an account book, administrator first."""
    require_book_access(db, book_id, requester_id)
    return db.query(AccountBookUser).filter(
        AccountBookUser.account_book_id == book_id
    ).order_by(
        AccountBookUser.is_creator.desc(),
        AccountBookUser.created_at.asc(),
        AccountBookUser.id.asc()
    ).all()
