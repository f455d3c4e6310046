"""
Tests for bill recording and search.
"""
import pytest
from datetime import datetime
from decimal import Decimal
from diaryledger.models.bill import Bill, BillTag
from diaryledger.services import bill_service, permission_service
from diaryledger.services.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError


@pytest.fixture
def food(make_tag):
    return make_tag("food", "bill")


@pytest.fixture
def travel(make_tag):
    return make_tag("travel", "bill")


def record(db, book, user, amount, bill_type="expense", day=1, **kwargs):
    return bill_service.create_bill(
        db, book.id, user.id, Decimal(amount), bill_type,
        bill_time=datetime(2024, 3, day, 12, 0), **kwargs
    )


def test_create_bill_with_tags(db, alice, book, food, travel):
    created = record(db, book, alice, "20.50", tag_ids=[food.id, travel.id, food.id], remark="lunch")
    assert created.bill.account_book_id == book.id
    assert created.bill.user_id == alice.id
    assert {t.id for t in created.tags} == {food.id, travel.id}
    assert db.query(BillTag).filter(BillTag.bill_id == created.bill.id).count() == 2


def test_create_bill_requires_access(db, bob, book):
    with pytest.raises(ForbiddenError):
        record(db, book, bob, "10")
    assert db.query(Bill).count() == 0


def test_create_bill_validates_input(db, alice, book, make_tag):
    with pytest.raises(InvalidArgumentError):
        record(db, book, alice, "0")
    with pytest.raises(InvalidArgumentError):
        record(db, book, alice, "5", bill_type="transfer")
    diary_tag = make_tag("mood", "diary")
    with pytest.raises(InvalidArgumentError):
        record(db, book, alice, "5", tag_ids=[diary_tag.id])
    with pytest.raises(NotFoundError):
        record(db, book, alice, "5", tag_ids=["missing"])
    assert db.query(Bill).count() == 0


def test_shared_member_can_record(db, alice, bob, book):
    permission_service.grant_book_access(db, book.id, alice.id, bob.id)
    created = record(db, book, bob, "8")
    assert created.bill.user_id == bob.id


def test_update_bill_partial(db, alice, book, food, travel):
    created = record(db, book, alice, "20", tag_ids=[food.id], remark="lunch")

    updated = bill_service.update_bill(db, created.bill.id, alice.id, fields={"amount": Decimal("25")})
    assert updated.bill.amount == Decimal("25")
    assert updated.bill.remark == "lunch"
    assert updated.bill.type == "expense"
    assert [t.id for t in updated.tags] == [food.id]


def test_update_bill_replaces_tags(db, alice, book, food, travel):
    created = record(db, book, alice, "20", tag_ids=[food.id])
    updated = bill_service.update_bill(db, created.bill.id, alice.id, tag_ids=[travel.id])
    assert [t.id for t in updated.tags] == [travel.id]

    cleared = bill_service.update_bill(db, created.bill.id, alice.id, tag_ids=[])
    assert cleared.tags == []


def test_update_bill_keeps_book_and_owner(db, alice, bob, book):
    permission_service.grant_book_access(db, book.id, alice.id, bob.id)
    created = record(db, book, alice, "20")
    updated = bill_service.update_bill(db, created.bill.id, bob.id, fields={"remark": "fixed"})
    assert updated.bill.user_id == alice.id
    assert updated.bill.account_book_id == book.id


def test_update_bill_requires_access(db, alice, bob, book):
    created = record(db, book, alice, "20")
    with pytest.raises(ForbiddenError):
        bill_service.update_bill(db, created.bill.id, bob.id, fields={"amount": Decimal("1")})


def test_delete_bill_removes_tag_links(db, alice, book, food):
    created = record(db, book, alice, "20", tag_ids=[food.id])
    bill_service.delete_bill(db, created.bill.id, alice.id)
    assert db.query(Bill).count() == 0
    assert db.query(BillTag).count() == 0
    with pytest.raises(NotFoundError):
        bill_service.get_bill_with_tags(db, created.bill.id, alice.id)


def test_get_bills_newest_first_and_paged(db, alice, book):
    for day in range(1, 6):
        record(db, book, alice, str(day), day=day)

    bills, total = bill_service.get_bills(db, book.id, alice.id, page=1, page_size=2)
    assert total == 5
    assert [b.bill.amount for b in bills] == [Decimal("5"), Decimal("4")]

    bills, total = bill_service.get_bills(db, book.id, alice.id, page=3, page_size=2)
    assert [b.bill.amount for b in bills] == [Decimal("1")]


def test_get_bills_tag_filter_requires_all_tags(db, alice, book, food, travel):
    both = record(db, book, alice, "30", tag_ids=[food.id, travel.id])
    record(db, book, alice, "10", tag_ids=[food.id])
    record(db, book, alice, "15")

    bills, total = bill_service.get_bills(db, book.id, alice.id, tag_ids=[food.id, travel.id])
    assert total == 1
    assert bills[0].bill.id == both.bill.id

    bills, total = bill_service.get_bills(db, book.id, alice.id, tag_ids=[food.id])
    assert total == 2


def test_get_bills_combined_filters(db, alice, book):
    record(db, book, alice, "100", "income", day=1, remark="salary")
    record(db, book, alice, "40", day=5, remark="groceries")
    record(db, book, alice, "5", day=10, remark="coffee")

    bills, total = bill_service.get_bills(db, book.id, alice.id, bill_type="expense")
    assert total == 2

    bills, total = bill_service.get_bills(
        db, book.id, alice.id,
        start_time=datetime(2024, 3, 2),
        end_time=datetime(2024, 3, 31),
        min_amount=Decimal("10")
    )
    assert [b.bill.remark for b in bills] == ["groceries"]

    bills, total = bill_service.get_bills(db, book.id, alice.id, keyword="coff", max_amount=Decimal("5"))
    assert [b.bill.remark for b in bills] == ["coffee"]


def test_get_bills_scoped_to_book(db, alice, book):
    from diaryledger.services.account_book_service import create_account_book
    other = create_account_book(db, alice.id, "Other")
    record(db, book, alice, "10")
    record(db, other, alice, "20")

    bills, total = bill_service.get_bills(db, book.id, alice.id)
    assert total == 1
    assert bills[0].bill.account_book_id == book.id


def test_deleting_book_removes_its_bills(db, alice, book, food):
    from diaryledger.services.account_book_service import delete_account_book
    record(db, book, alice, "10", tag_ids=[food.id])
    delete_account_book(db, book.id, alice.id)
    assert db.query(Bill).count() == 0
    assert db.query(BillTag).count() == 0


@pytest.mark.parametrize("amount", ["0.001", "12.345", "100000000", "123456789.50"])
def test_create_bill_rejects_amounts_the_column_cannot_hold(db, alice, book, amount):
    with pytest.raises(InvalidArgumentError):
        record(db, book, alice, amount)
    assert db.query(Bill).count() == 0


def test_create_bill_accepts_largest_amount(db, alice, book):
    created = record(db, book, alice, "99999999.99")
    assert created.bill.amount == Decimal("99999999.99")


def test_update_bill_rejects_sub_cent_amount(db, alice, book):
    created = record(db, book, alice, "20")
    with pytest.raises(InvalidArgumentError):
        bill_service.update_bill(db, created.bill.id, alice.id, fields={"amount": Decimal("0.004")})
    assert bill_service.get_bill_with_tags(db, created.bill.id, alice.id).bill.amount == Decimal("20")


def test_update_bill_clears_image_url(db, alice, book):
    created = record(db, book, alice, "20", image_url="https://img/receipt.jpg", remark="lunch")
    updated = bill_service.update_bill(db, created.bill.id, alice.id, fields={"image_url": None})
    assert updated.bill.image_url is None
    assert updated.bill.remark == "lunch"


def test_update_bill_rejects_null_required_field(db, alice, book):
    created = record(db, book, alice, "20")
    with pytest.raises(InvalidArgumentError):
        bill_service.update_bill(db, created.bill.id, alice.id, fields={"amount": None})
    with pytest.raises(InvalidArgumentError):
        bill_service.update_bill(db, created.bill.id, alice.id, fields={"account_book_id": "other"})


def test_search_and_stats_require_access(db, alice, bob, book):
    record(db, book, alice, "20")
    with pytest.raises(ForbiddenError):
        bill_service.get_bills(db, book.id, bob.id)
    with pytest.raises(ForbiddenError):
        bill_service.get_stats(db, book.id, bob.id)
    with pytest.raises(NotFoundError):
        bill_service.get_bills(db, "missing", alice.id)
