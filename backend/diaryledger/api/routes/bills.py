"""
Bill routes: record, search and summarize bills of an account book.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from diaryledger.db.session import get_db
from diaryledger.schemas.bill import (
    BillCreate, BillUpdate, BillWithTagsResponse, BillStatsResponse
)
from diaryledger.schemas.common import PagedResponse
from diaryledger.models.user import User
from diaryledger.models.bill import BillType
from diaryledger.api.dependencies import get_current_user
from diaryledger.core.utils import end_of_day, normalize_pagination, start_of_day
from diaryledger.services import bill_service

router = APIRouter(tags=["bills"])


@router.post("/bills", response_model=BillWithTagsResponse, status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_data: BillCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record a bill in an account book."""
    return bill_service.create_bill(
        db,
        book_id=bill_data.account_book_id,
        user_id=current_user.id,
        amount=bill_data.amount,
        bill_type=bill_data.type.value,
        tag_ids=bill_data.tag_ids,
        remark=bill_data.remark,
        image_url=bill_data.image_url,
        bill_time=bill_data.bill_time
    )


@router.get("/account-books/{book_id}/bills", response_model=PagedResponse[BillWithTagsResponse])
async def search_bills(
    book_id: str,
    page: int = Query(1),
    page_size: int = Query(10),
    type: Optional[BillType] = None,
    tag_ids: List[str] = Query([]),
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    keyword: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Search bills of an account book, newest first."""
    page, page_size = normalize_pagination(page, page_size)

    bills, total = bill_service.get_bills(
        db,
        book_id,
        current_user.id,
        page=page,
        page_size=page_size,
        bill_type=type.value if type else None,
        tag_ids=tag_ids,
        start_time=start_of_day(start_time),
        end_time=_inclusive_end(end_time),
        min_amount=min_amount,
        max_amount=max_amount,
        keyword=keyword
    )
    return {"list": bills, "total": total, "page": page, "page_size": page_size}


@router.get("/account-books/{book_id}/bills/stats", response_model=BillStatsResponse)
async def get_bill_stats(
    book_id: str,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    group_by: Optional[str] = Query(None, description="day, week, month or year"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Income, expense and net totals, per tag and optionally per time bucket."""
    return bill_service.get_stats(
        db,
        book_id,
        current_user.id,
        start_time=start_of_day(start_time),
        end_time=_inclusive_end(end_time),
        group_by=group_by
    )


@router.get("/bills/{bill_id}", response_model=BillWithTagsResponse)
async def get_bill(
    bill_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a bill with its tags."""
    return bill_service.get_bill_with_tags(db, bill_id, current_user.id)


@router.put("/bills/{bill_id}", response_model=BillWithTagsResponse)
async def update_bill(
    bill_id: str,
    bill_data: BillUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a bill. Omitted fields keep their values; a null image_url clears it."""
    fields = bill_data.model_dump(
        include={"amount", "type", "remark", "image_url", "bill_time"},
        exclude_unset=True
    )
    if fields.get("type") is not None:
        fields["type"] = fields["type"].value
    return bill_service.update_bill(
        db,
        bill_id,
        current_user.id,
        fields=fields,
        tag_ids=bill_data.tag_ids
    )


@router.delete("/bills/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bill(
    bill_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a bill."""
    bill_service.delete_bill(db, bill_id, current_user.id)


def _inclusive_end(value: Optional[datetime]) -> Optional[datetime]:
    # A bare date arrives as midnight; widen it to cover the whole day
    if value is not None and value.time() == datetime.min.time():
        return end_of_day(value.date())
    return value
