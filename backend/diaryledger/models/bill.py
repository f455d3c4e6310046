"""
Bill model for ledger transactions.
"""
from datetime import datetime
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from diaryledger.db.base import BaseModel
import enum


class BillType(str, enum.Enum):
    """Bill direction. Amounts are stored positive."""
    INCOME = "income"
    EXPENSE = "expense"


class Bill(BaseModel):
    """A single income or expense recorded in an account book."""
    __tablename__ = "bills"

    account_book_id = Column(String(36), ForeignKey("account_books.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(String(20), nullable=False, index=True)
    remark = Column(Text, nullable=False, default="")
    image_url = Column(String(500), nullable=True)
    bill_time = Column(DateTime, default=datetime.now, nullable=False, index=True)

    # Relationships
    account_book = relationship("AccountBook", back_populates="bills")
    user = relationship("User", back_populates="bills")
    tags = relationship("BillTag", back_populates="bill", cascade="all, delete-orphan")


class BillTag(BaseModel):
    """Junction table for Bill and Tag."""
    __tablename__ = "bill_tags"

    bill_id = Column(String(36), ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(String(36), ForeignKey("tags.id"), nullable=False, index=True)

    # Relationships
    bill = relationship("Bill", back_populates="tags")
    tag = relationship("Tag", back_populates="bill_links")
