"""
Diary model and its association, media, tag and like tables.
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from diaryledger.db.base import BaseModel


class Diary(BaseModel):
    """Diary entry. Access is granted through DiaryUser rows, not an owner column."""
    __tablename__ = "diaries"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    address = Column(String(255), nullable=True)
    pageview = Column(Integer, default=0, nullable=False)
    like_count = Column(Integer, default=0, nullable=False)  # mirrors count(diary_likes)

    # Relationships
    users = relationship("DiaryUser", back_populates="diary", cascade="all, delete-orphan")
    permission_link = relationship("DiaryPermission", back_populates="diary", uselist=False, cascade="all, delete-orphan")
    tags = relationship("DiaryTag", back_populates="diary", cascade="all, delete-orphan")
    images = relationship("DiaryImage", back_populates="diary", cascade="all, delete-orphan")
    videos = relationship("DiaryVideo", back_populates="diary", cascade="all, delete-orphan")
    likes = relationship("DiaryLike", back_populates="diary", cascade="all, delete-orphan")


class DiaryUser(BaseModel):
    """Junction table granting a user access to a diary."""
    __tablename__ = "diary_users"

    diary_id = Column(String(36), ForeignKey("diaries.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_creator = Column(Boolean, default=False, nullable=False)

    # Relationships
    diary = relationship("Diary", back_populates="users")
    user = relationship("User", back_populates="diary_links")

    __table_args__ = (
        UniqueConstraint("diary_id", "user_id", name="uq_diary_user"),
    )


class DiaryPermission(BaseModel):
    """One-to-one link from a diary to its permission level."""
    __tablename__ = "diary_permissions"

    diary_id = Column(String(36), ForeignKey("diaries.id", ondelete="CASCADE"), nullable=False, unique=True)
    permission_id = Column(String(36), ForeignKey("permissions.id"), nullable=False, index=True)

    # Relationships
    diary = relationship("Diary", back_populates="permission_link")
    permission = relationship("Permission", back_populates="diary_links")


class DiaryTag(BaseModel):
    """Junction table for Diary and Tag."""
    __tablename__ = "diary_tags"

    diary_id = Column(String(36), ForeignKey("diaries.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(String(36), ForeignKey("tags.id"), nullable=False, index=True)

    # Relationships
    diary = relationship("Diary", back_populates="tags")
    tag = relationship("Tag", back_populates="diary_links")


class DiaryImage(BaseModel):
    """Image URL attached to a diary."""
    __tablename__ = "diary_images"

    diary_id = Column(String(36), ForeignKey("diaries.id", ondelete="CASCADE"), nullable=False, index=True)
    image_url = Column(Text, nullable=False)

    diary = relationship("Diary", back_populates="images")


class DiaryVideo(BaseModel):
    """Video URL attached to a diary."""
    __tablename__ = "diary_videos"

    diary_id = Column(String(36), ForeignKey("diaries.id", ondelete="CASCADE"), nullable=False, index=True)
    video_url = Column(Text, nullable=False)

    diary = relationship("Diary", back_populates="videos")


class DiaryLike(BaseModel):
    """One row per (diary, user) like."""
    __tablename__ = "diary_likes"

    diary_id = Column(String(36), ForeignKey("diaries.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    diary = relationship("Diary", back_populates="likes")
    user = relationship("User", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("diary_id", "user_id", name="uq_diary_like"),
    )
