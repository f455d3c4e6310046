"""
Diary permission levels.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from diaryledger.db.base import BaseModel
import enum


class PermissionLevel(str, enum.Enum):
    """Closed set of diary visibility levels."""
    PRIVATE = "private"
    PUBLIC = "public"
    SHARED_READ = "shared_read"
    SHARED_EDIT = "shared_edit"


class Permission(BaseModel):
    """A permission level row; diaries link to exactly one."""
    __tablename__ = "permissions"

    name = Column(String(50), unique=True, nullable=False)

    # Relationships
    diary_links = relationship("DiaryPermission", back_populates="permission")
