"""
Bill service: bookkeeping writes, search and statistics.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session
from diaryledger.core.utils import normalize_pagination
from diaryledger.models.bill import Bill, BillTag, BillType
from diaryledger.models.tag import Tag, TagCategory
from diaryledger.services.exceptions import InvalidArgumentError, NotFoundError
from diaryledger.services.permission_service import require_book_access
from diaryledger.services.tag_service import resolve_tags

logger = logging.getLogger(__name__)

BILL_TYPES = [bill_type.value for bill_type in BillType]
GROUP_BY_OPTIONS = ("day", "week", "month", "year")

# Appended to tag names in tag statistics so income and expense never merge
TAG_STAT_SUFFIXES = {
    BillType.INCOME.value: "(income)",
    BillType.EXPENSE.value: "(expense)",
}

ZERO = Decimal("0")
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("100000000")

EDITABLE_FIELDS = ("amount", "type", "remark", "image_url", "bill_time")


@dataclass
class BillWithTags:
    bill: Bill
    tags: List[Tag] = field(default_factory=list)


@dataclass
class BillGroupStats:
    group_key: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    net_amount: Decimal = ZERO


@dataclass
class BillStats:
    total_income: Decimal
    total_expense: Decimal
    net_amount: Decimal
    tag_stats: Dict[str, Decimal] = field(default_factory=dict)
    group_stats: Optional[List[BillGroupStats]] = None


def _to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def validate_bill_type(bill_type: str) -> str:
    if bill_type not in BILL_TYPES:
        raise InvalidArgumentError(f"Invalid bill type: {bill_type}")
    return bill_type


def validate_amount(amount) -> Decimal:
    """Amounts are positive with at most two decimal places and fit Numeric(10, 2)."""
    value = _to_decimal(amount)
    if value <= 0:
        raise InvalidArgumentError("Amount must be greater than zero")
    if value != value.quantize(CENT):
        raise InvalidArgumentError("Amount cannot have more than two decimal places")
    if value >= MAX_AMOUNT:
        raise InvalidArgumentError(f"Amount must be less than {MAX_AMOUNT:,}")
    return value


def _window_filters(book_id: str, start_time: Optional[datetime], end_time: Optional[datetime]) -> list:
    filters = [Bill.account_book_id == book_id]
    if start_time is not None:
        filters.append(Bill.bill_time >= start_time)
    if end_time is not None:
        filters.append(Bill.bill_time <= end_time)
    return filters


def _tags_for_bills(db: Session, bill_ids: Sequence[str]) -> Dict[str, List[Tag]]:
    """Load tags for several bills in one query."""
    result: Dict[str, List[Tag]] = {bill_id: [] for bill_id in bill_ids}
    if not bill_ids:
        return result

    rows = db.query(BillTag.bill_id, Tag).join(
        Tag, Tag.id == BillTag.tag_id
    ).filter(
        BillTag.bill_id.in_(bill_ids)
    ).order_by(Tag.tag_name).all()

    for bill_id, tag in rows:
        result[bill_id].append(tag)
    return result


def _attach_tags(db: Session, bill_id: str, tags: Iterable[Tag]) -> None:
    for tag in tags:
        db.add(BillTag(bill_id=bill_id, tag_id=tag.id))


def get_bill_or_404(db: Session, bill_id: str) -> Bill:
    bill = db.query(Bill).filter(Bill.id == bill_id).first()
    if not bill:
        raise NotFoundError("Bill not found")
    return bill


def get_bill_with_tags(db: Session, bill_id: str, user_id: str) -> BillWithTags:
    """Get a bill and its tags; the user must have access to its account book."""
    bill = get_bill_or_404(db, bill_id)
    require_book_access(db, bill.account_book_id, user_id)
    return BillWithTags(bill=bill, tags=_tags_for_bills(db, [bill.id])[bill.id])


def create_bill(
    db: Session,
    book_id: str,
    user_id: str,
    amount: Decimal,
    bill_type: str,
    tag_ids: Iterable[str] = (),
    remark: str = "",
    image_url: Optional[str] = None,
    bill_time: Optional[datetime] = None,
) -> BillWithTags:
    """Record a bill and its tag links in one transaction."""
    require_book_access(db, book_id, user_id)
    validate_bill_type(bill_type)
    amount = validate_amount(amount)
    tags = resolve_tags(db, tag_ids, TagCategory.BILL.value)

    bill = Bill(
        account_book_id=book_id,
        user_id=user_id,
        amount=amount,
        type=bill_type,
        remark=remark or "",
        image_url=image_url,
        bill_time=bill_time or datetime.now()
    )
    db.add(bill)
    db.flush()

    _attach_tags(db, bill.id, tags)
    db.commit()
    db.refresh(bill)

    logger.info("User %s recorded %s bill %s in account book %s", user_id, bill_type, bill.id, book_id)
    return BillWithTags(bill=bill, tags=tags)


def update_bill(
    db: Session,
    bill_id: str,
    user_id: str,
    fields: Optional[Dict[str, Any]] = None,
    tag_ids: Optional[Iterable[str]] = None,
) -> BillWithTags:
    """
    Update a bill.

    ``fields`` holds new values for amount, type, remark, image_url and
    bill_time; a field left out keeps its value. ``image_url`` may be set to
    None to clear it, and a None remark becomes empty. The bill's account
    book and recording user never change. When ``tag_ids`` is given, the
    bill's whole tag set is replaced by it.
    """
    bill = get_bill_or_404(db, bill_id)
    require_book_access(db, bill.account_book_id, user_id)

    changes = {}
    for name, value in (fields or {}).items():
        if name not in EDITABLE_FIELDS:
            raise InvalidArgumentError(f"Field cannot be updated: {name}")
        if name == "image_url":
            changes[Bill.image_url] = value
        elif name == "remark":
            changes[Bill.remark] = value or ""
        elif value is None:
            raise InvalidArgumentError(f"Field cannot be empty: {name}")
        elif name == "amount":
            changes[Bill.amount] = validate_amount(value)
        elif name == "type":
            changes[Bill.type] = validate_bill_type(value)
        else:
            changes[Bill.bill_time] = value

    tags = None
    if tag_ids is not None:
        tags = resolve_tags(db, tag_ids, TagCategory.BILL.value)

    if changes:
        db.query(Bill).filter(Bill.id == bill_id).update(changes, synchronize_session="fetch")

    if tags is not None:
        db.query(BillTag).filter(BillTag.bill_id == bill_id).delete(synchronize_session=False)
        _attach_tags(db, bill_id, tags)

    db.commit()
    db.refresh(bill)
    return BillWithTags(bill=bill, tags=_tags_for_bills(db, [bill_id])[bill_id])


def delete_bill(db: Session, bill_id: str, user_id: str) -> None:
    """Delete a bill and its tag links."""
    bill = get_bill_or_404(db, bill_id)
    require_book_access(db, bill.account_book_id, user_id)

    db.delete(bill)
    db.commit()
    logger.info("User %s deleted bill %s", user_id, bill_id)


def get_bills(
    db: Session,
    book_id: str,
    user_id: str,
    page: int = 1,
    page_size: int = 10,
    bill_type: Optional[str] = None,
    tag_ids: Iterable[str] = (),
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    keyword: Optional[str] = None,
) -> Tuple[List[BillWithTags], int]:
    """
    Search bills of one account book.

    All filters combine with AND. A non-empty ``tag_ids`` keeps only bills
    carrying every listed tag. Returns the requested page, newest first,
    and the total number of matching bills.
    """
    require_book_access(db, book_id, user_id)
    page, page_size = normalize_pagination(page, page_size)

    query = db.query(Bill).filter(*_window_filters(book_id, start_time, end_time))

    if bill_type:
        query = query.filter(Bill.type == validate_bill_type(bill_type))

    wanted_tags = list(dict.fromkeys(tag_ids or ()))
    if wanted_tags:
        carrying_all = select(BillTag.bill_id).where(
            BillTag.tag_id.in_(wanted_tags)
        ).group_by(
            BillTag.bill_id
        ).having(
            func.count(distinct(BillTag.tag_id)) == len(wanted_tags)
        )
        query = query.filter(Bill.id.in_(carrying_all))

    if min_amount is not None:
        query = query.filter(Bill.amount >= min_amount)
    if max_amount is not None:
        query = query.filter(Bill.amount <= max_amount)

    if keyword:
        query = query.filter(Bill.remark.like(f"%{keyword}%"))

    total = query.count()
    bills = query.order_by(
        Bill.bill_time.desc(),
        Bill.id
    ).offset((page - 1) * page_size).limit(page_size).all()

    tags_by_bill = _tags_for_bills(db, [bill.id for bill in bills])
    return [BillWithTags(bill=bill, tags=tags_by_bill[bill.id]) for bill in bills], total


# Statistics

def _as_date(value) -> date:
    """Normalize a DATE() result; drivers return date objects or ISO strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def bucket_key(day: date, group_by: str) -> str:
    """Calendar bucket for a day: YYYY-MM-DD, ISO YYYY-Www, YYYY-MM or YYYY."""
    if group_by == "day":
        return day.isoformat()
    if group_by == "week":
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if group_by == "month":
        return f"{day.year}-{day.month:02d}"
    return str(day.year)


def _sum_for_type(db: Session, filters: list, bill_type: str) -> Decimal:
    total = db.query(
        func.coalesce(func.sum(Bill.amount), 0)
    ).filter(*filters, Bill.type == bill_type).scalar()
    return _to_decimal(total)


def _tag_stats(db: Session, filters: list) -> Dict[str, Decimal]:
    rows = db.query(
        Tag.tag_name,
        Bill.type,
        func.sum(Bill.amount)
    ).select_from(Bill).join(
        BillTag, BillTag.bill_id == Bill.id
    ).join(
        Tag, Tag.id == BillTag.tag_id
    ).filter(*filters).group_by(Tag.id, Tag.tag_name, Bill.type).all()

    stats: Dict[str, Decimal] = {}
    for tag_name, bill_type, amount in rows:
        key = f"{tag_name}{TAG_STAT_SUFFIXES.get(bill_type, f'({bill_type})')}"
        stats[key] = stats.get(key, ZERO) + _to_decimal(amount)
    return stats


def _sums_by_bucket(db: Session, filters: list, bill_type: str, group_by: str) -> Dict[str, Decimal]:
    """Sum one bill type per bucket; daily sums come from SQL, coarser buckets are rolled up here."""
    day = func.date(Bill.bill_time)
    rows = db.query(
        day,
        func.sum(Bill.amount)
    ).filter(*filters, Bill.type == bill_type).group_by(day).all()

    sums: Dict[str, Decimal] = {}
    for day_value, amount in rows:
        key = bucket_key(_as_date(day_value), group_by)
        sums[key] = sums.get(key, ZERO) + _to_decimal(amount)
    return sums


def _group_stats(db: Session, filters: list, group_by: str) -> List[BillGroupStats]:
    income = _sums_by_bucket(db, filters, BillType.INCOME.value, group_by)
    expense = _sums_by_bucket(db, filters, BillType.EXPENSE.value, group_by)

    groups = []
    for key in sorted(set(income) | set(expense)):
        group_income = income.get(key, ZERO)
        group_expense = expense.get(key, ZERO)
        groups.append(BillGroupStats(
            group_key=key,
            income=group_income,
            expense=group_expense,
            net_amount=group_income - group_expense
        ))
    return groups


def get_stats(
    db: Session,
    book_id: str,
    user_id: str,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    group_by: Optional[str] = None,
) -> BillStats:
    """
    Compute income/expense totals for an account book.

    Both window bounds are inclusive; a missing bound leaves that side open.
    Tag statistics report income and expense sums of the same tag as
    separate entries. An unrecognized ``group_by`` yields no group stats.
    """
    require_book_access(db, book_id, user_id)
    filters = _window_filters(book_id, start_time, end_time)

    total_income = _sum_for_type(db, filters, BillType.INCOME.value)
    total_expense = _sum_for_type(db, filters, BillType.EXPENSE.value)

    stats = BillStats(
        total_income=total_income,
        total_expense=total_expense,
        net_amount=total_income - total_expense,
        tag_stats=_tag_stats(db, filters)
    )

    if group_by in GROUP_BY_OPTIONS:
        stats.group_stats = _group_stats(db, filters, group_by)

    return stats
