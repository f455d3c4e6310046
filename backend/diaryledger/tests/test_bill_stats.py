"""
Tests for bill statistics.
"""
import pytest
from datetime import date, datetime
from decimal import Decimal
from diaryledger.services import bill_service


def record(db, book, user, amount, bill_type, when, tag_ids=()):
    return bill_service.create_bill(
        db, book.id, user.id, Decimal(amount), bill_type, tag_ids=tag_ids, bill_time=when
    )


@pytest.fixture
def ledger(db, alice, book, make_tag):
    food = make_tag("food", "bill")
    work = make_tag("work", "bill")
    record(db, book, alice, "1000", "income", datetime(2024, 1, 5, 9), [work.id])
    record(db, book, alice, "50.25", "expense", datetime(2024, 1, 5, 18), [food.id])
    record(db, book, alice, "20", "income", datetime(2024, 1, 20, 10), [food.id])
    record(db, book, alice, "200", "expense", datetime(2024, 2, 1, 8), [food.id, work.id])
    return book


def test_totals(db, alice, ledger):
    stats = bill_service.get_stats(db, ledger.id, alice.id)
    assert stats.total_income == Decimal("1020")
    assert stats.total_expense == Decimal("250.25")
    assert stats.net_amount == Decimal("769.75")
    assert stats.group_stats is None


def test_empty_book_totals_are_zero(db, alice, book):
    stats = bill_service.get_stats(db, book.id, alice.id, group_by="month")
    assert stats.total_income == 0
    assert stats.total_expense == 0
    assert stats.net_amount == 0
    assert stats.tag_stats == {}
    assert stats.group_stats == []


def test_tag_stats_keep_income_and_expense_apart(db, alice, ledger):
    stats = bill_service.get_stats(db, ledger.id, alice.id)
    assert stats.tag_stats == {
        "work(income)": Decimal("1000"),
        "food(expense)": Decimal("250.25"),
        "food(income)": Decimal("20"),
        "work(expense)": Decimal("200"),
    }


def test_window_is_inclusive(db, alice, ledger):
    stats = bill_service.get_stats(
        db, ledger.id, alice.id,
        start_time=datetime(2024, 1, 5, 18),
        end_time=datetime(2024, 2, 1, 8)
    )
    assert stats.total_income == Decimal("20")
    assert stats.total_expense == Decimal("250.25")
    assert "work(income)" not in stats.tag_stats


def test_group_by_month(db, alice, ledger):
    stats = bill_service.get_stats(db, ledger.id, alice.id, group_by="month")
    assert [(g.group_key, g.income, g.expense, g.net_amount) for g in stats.group_stats] == [
        ("2024-01", Decimal("1020"), Decimal("50.25"), Decimal("969.75")),
        ("2024-02", Decimal("0"), Decimal("200"), Decimal("-200")),
    ]


def test_group_by_day_zero_fills(db, alice, ledger):
    stats = bill_service.get_stats(db, ledger.id, alice.id, group_by="day")
    by_key = {g.group_key: g for g in stats.group_stats}
    assert list(by_key) == ["2024-01-05", "2024-01-20", "2024-02-01"]
    assert by_key["2024-01-20"].expense == 0
    assert by_key["2024-02-01"].income == 0


def test_group_by_year(db, alice, ledger):
    stats = bill_service.get_stats(db, ledger.id, alice.id, group_by="year")
    assert len(stats.group_stats) == 1
    assert stats.group_stats[0].group_key == "2024"
    assert stats.group_stats[0].net_amount == stats.net_amount


def test_unknown_group_by_yields_no_groups(db, alice, ledger):
    stats = bill_service.get_stats(db, ledger.id, alice.id, group_by="fortnight")
    assert stats.group_stats is None


@pytest.mark.parametrize("day,group_by,expected", [
    (date(2024, 3, 9), "day", "2024-03-09"),
    (date(2024, 3, 9), "week", "2024-W10"),
    (date(2021, 1, 1), "week", "2020-W53"),
    (date(2024, 3, 9), "month", "2024-03"),
    (date(2024, 3, 9), "year", "2024"),
])
def test_bucket_key(day, group_by, expected):
    assert bill_service.bucket_key(day, group_by) == expected


def test_untagged_bills_count_in_totals_only(db, alice, book, make_tag):
    salary = make_tag("salary", "bill")
    food = make_tag("food", "bill")
    record(db, book, alice, "100", "income", datetime(2024, 4, 1, 9), [salary.id])
    record(db, book, alice, "40", "expense", datetime(2024, 4, 2, 12), [food.id])
    record(db, book, alice, "10", "expense", datetime(2024, 4, 3, 12))

    stats = bill_service.get_stats(db, book.id, alice.id)
    assert stats.total_income == Decimal("100")
    assert stats.total_expense == Decimal("50")
    assert stats.net_amount == Decimal("50")
    assert stats.tag_stats == {
        "salary(income)": Decimal("100"),
        "food(expense)": Decimal("40"),
    }
