"""
Account book (ledger) model for shared bookkeeping.
"""
from sqlalchemy import Column, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from diaryledger.db.base import BaseModel


class AccountBook(BaseModel):
    """A named container of bills shared among associated users."""
    __tablename__ = "account_books"

    name = Column(String(255), nullable=False)

    # Relationships
    users = relationship("AccountBookUser", back_populates="account_book", cascade="all, delete-orphan")
    bills = relationship("Bill", back_populates="account_book", cascade="all, delete-orphan")


class AccountBookUser(BaseModel):
    """Junction table for AccountBook and User. The creator row is the administrator."""
    __tablename__ = "account_book_users"

    account_book_id = Column(String(36), ForeignKey("account_books.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_creator = Column(Boolean, default=False, nullable=False)

    # Relationships
    account_book = relationship("AccountBook", back_populates="users")
    user = relationship("User", back_populates="account_book_links")

    __table_args__ = (
        UniqueConstraint("account_book_id", "user_id", name="uq_account_book_user"),
    )
