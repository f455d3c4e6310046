"""
Pydantic schemas for Bill entity.
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime
from decimal import Decimal
from diaryledger.models.bill import BillType
from diaryledger.schemas.tag import TagResponse


class BillCreate(BaseModel):
    """Schema for bill creation."""
    account_book_id: str
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    type: BillType
    tag_ids: List[str] = []
    bill_time: Optional[datetime] = None
    remark: str = ""
    image_url: Optional[str] = None


class BillUpdate(BaseModel):
    """Schema for bill update. Omitted fields keep their values; a null image_url clears it; tag_ids replaces the tag set."""
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    type: Optional[BillType] = None
    tag_ids: Optional[List[str]] = None
    bill_time: Optional[datetime] = None
    remark: Optional[str] = None
    image_url: Optional[str] = None


class BillResponse(BaseModel):
    """Schema for bill response."""
    id: str
    account_book_id: str
    user_id: str
    amount: Decimal
    type: str
    remark: str
    image_url: Optional[str] = None
    bill_time: datetime
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BillWithTagsResponse(BaseModel):
    """Schema for a bill together with its tags."""
    bill: BillResponse
    tags: List[TagResponse] = []

    class Config:
        from_attributes = True


class BillGroupStatsResponse(BaseModel):
    """Schema for one time bucket of bill statistics."""
    group_key: str
    income: Decimal
    expense: Decimal
    net_amount: Decimal

    class Config:
        from_attributes = True


class BillStatsResponse(BaseModel):
    """Schema for bill statistics."""
    total_income: Decimal
    total_expense: Decimal
    net_amount: Decimal
    tag_stats: Dict[str, Decimal] = {}
    group_stats: Optional[List[BillGroupStatsResponse]] = None

    class Config:
        from_attributes = True
