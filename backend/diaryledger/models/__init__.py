"""Models package - Import all models for SQLAlchemy registration."""
from diaryledger.models.user import User
from diaryledger.models.permission import Permission, PermissionLevel
from diaryledger.models.tag import Tag, TagCategory
from diaryledger.models.diary import (
    Diary, DiaryUser, DiaryPermission, DiaryTag, DiaryImage, DiaryVideo, DiaryLike
)
from diaryledger.models.account_book import AccountBook, AccountBookUser
from diaryledger.models.bill import Bill, BillTag, BillType

__all__ = [
    "User",
    "Permission",
    "PermissionLevel",
    "Tag",
    "TagCategory",
    "Diary",
    "DiaryUser",
    "DiaryPermission",
    "DiaryTag",
    "DiaryImage",
    "DiaryVideo",
    "DiaryLike",
    "AccountBook",
    "AccountBookUser",
    "Bill",
    "BillTag",
    "BillType",
]
