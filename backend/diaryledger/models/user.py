"""
User model for identity and profile information.
"""
from sqlalchemy import Column, String, Date, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from diaryledger.db.base import BaseModel


class User(BaseModel):
    """User model anchored on an immutable external identity pair."""
    __tablename__ = "users"

    provider = Column(String(50), nullable=False)
    provider_subject = Column(String(128), nullable=False)
    username = Column(String(100), nullable=False, index=True)
    avatar = Column(String(500), nullable=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    gender = Column(String(20), nullable=True)
    birthday = Column(Date, nullable=True)
    address = Column(String(255), nullable=True)
    remark = Column(Text, nullable=True)

    # Relationships
    diary_links = relationship("DiaryUser", back_populates="user", cascade="all, delete-orphan")
    account_book_links = relationship("AccountBookUser", back_populates="user", cascade="all, delete-orphan")
    bills = relationship("Bill", back_populates="user", cascade="all, delete-orphan")
    likes = relationship("DiaryLike", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("provider", "provider_subject", name="uq_user_external_identity"),
    )
