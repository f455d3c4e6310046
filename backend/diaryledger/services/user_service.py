"""
User service for profile lookups and updates.
"""
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from diaryledger.core.utils import normalize_pagination
from diaryledger.models.user import User
from diaryledger.services.exceptions import InvalidArgumentError, NotFoundError

PROFILE_FIELDS = ("username", "avatar", "email", "phone", "gender", "birthday", "address", "remark")


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def list_users(db: Session, page: int = 1, page_size: int = 10, keyword: Optional[str] = None) -> Tuple[List[User], int]:
    """Page through users, optionally matching a username keyword."""
    page, page_size = normalize_pagination(page, page_size)
    query = db.query(User)
    if keyword:
        query = query.filter(User.username.like(f"%{keyword}%"))
    total = query.count()
    users = query.order_by(User.created_at, User.id).offset((page - 1) * page_size).limit(page_size).all()
    return users, total


def update_profile(db: Session, user_id: str, changes: Dict[str, Any]) -> User:
    """Update profile fields. The external identity pair is never touched."""
    user = get_user(db, user_id)
    for name, value in changes.items():
        if name not in PROFILE_FIELDS:
            raise InvalidArgumentError(f"Field cannot be updated: {name}")
        setattr(user, name, value)
    db.commit()
    db.refresh(user)
    return user
