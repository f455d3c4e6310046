"""
Tag model shared by bills and diaries.
"""
from sqlalchemy import Column, String, UniqueConstraint
from sqlalchemy.orm import relationship
from diaryledger.db.base import BaseModel
import enum


class TagCategory(str, enum.Enum):
    """Tag namespace partition."""
    BILL = "bill"
    DIARY = "diary"


class Tag(BaseModel):
    """A reusable label scoped to one category."""
    __tablename__ = "tags"

    tag_name = Column(String(100), nullable=False)
    type = Column(String(100), nullable=False, default="")  # free-form label: travel, dining, shopping...
    category = Column(String(20), nullable=False, index=True)

    # Relationships
    bill_links = relationship("BillTag", back_populates="tag")
    diary_links = relationship("DiaryTag", back_populates="tag")

    __table_args__ = (
        UniqueConstraint("tag_name", "category", name="uq_tag_name_category"),
    )
