from datetime import date

import pytest

from edura_finance.app.core.errors import CategoryInUseError, FinanceValidationError
from edura_finance.app.db.base import Base
from edura_finance.app.db.session import SessionLocal, engine
from edura_finance.app.models.expense import Expense
from edura_finance.app.services.expenses import (
    create_category,
    create_expense,
    delete_category,
    expand_occurrences,
    expense_summary,
    expense_total,
    update_expense,
)
from edura_finance.app.services.periods import ReportingWindow


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _expense(anchor, interval=None):
    return Expense(
        id=1,
        category_id=1,
        amount=100,
        expense_date=anchor,
        is_recurring=interval is not None,
        recurring_interval=interval,
    )


def test_monthly_recurrence_lands_on_anchor_day():
    expense = _expense(date(2024, 1, 10), "monthly")
    assert expand_occurrences(expense, date(2024, 6, 1), date(2024, 6, 30)) == [date(2024, 6, 10)]
    assert expand_occurrences(expense, date(2023, 12, 1), date(2023, 12, 31)) == []


def test_monthly_recurrence_clamps_to_month_end():
    expense = _expense(date(2024, 1, 31), "monthly")
    assert expand_occurrences(expense, date(2024, 2, 1), date(2024, 4, 30)) == [
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_quarterly_and_yearly_steps():
    quarterly = _expense(date(2024, 2, 5), "quarterly")
    assert expand_occurrences(quarterly, date(2024, 1, 1), date(2024, 12, 31)) == [
        date(2024, 2, 5),
        date(2024, 5, 5),
        date(2024, 8, 5),
        date(2024, 11, 5),
    ]
    leap = _expense(date(2024, 2, 29), "yearly")
    assert expand_occurrences(leap, date(2025, 1, 1), date(2025, 12, 31)) == [date(2025, 2, 28)]


def test_one_off_expense_only_in_its_own_window():
    expense = _expense(date(2024, 3, 3))
    assert expand_occurrences(expense, date(2024, 3, 1), date(2024, 3, 31)) == [date(2024, 3, 3)]
    assert expand_occurrences(expense, date(2024, 4, 1), date(2024, 4, 30)) == []


def test_recurring_expense_requires_interval():
    with SessionLocal() as db:
        category = create_category(db, name="Rent", type="facility")
        with pytest.raises(FinanceValidationError):
            create_expense(db, category_id=category.id, amount=100, expense_date=date(2024, 1, 1), is_recurring=True)
        with pytest.raises(FinanceValidationError):
            create_expense(db, category_id=category.id, amount=0, expense_date=date(2024, 1, 1))


def test_category_with_expenses_cannot_be_deleted():
    with SessionLocal() as db:
        used = create_category(db, name="Rent", type="facility")
        unused = create_category(db, name="Ads", type="marketing")
        create_expense(db, category_id=used.id, amount=5000000, expense_date=date(2024, 1, 1))

        with pytest.raises(CategoryInUseError):
            delete_category(db, used.id)
        delete_category(db, unused.id)


def test_category_type_is_validated():
    with SessionLocal() as db:
        with pytest.raises(FinanceValidationError):
            create_category(db, name="Misc", type="payroll")


def test_totals_expand_recurring_expenses_per_window():
    with SessionLocal() as db:
        rent = create_category(db, name="Rent", type="facility")
        ads = create_category(db, name="Ads", type="marketing")
        create_expense(
            db,
            category_id=rent.id,
            amount=5000000,
            expense_date=date(2024, 1, 10),
            is_recurring=True,
            recurring_interval="monthly",
        )
        create_expense(db, category_id=ads.id, amount=700000, expense_date=date(2024, 6, 2))

        assert expense_total(db, ReportingWindow.for_month("2024-06")) == 5700000
        assert expense_total(db, ReportingWindow.for_month("2023-12")) == 0

        summary = expense_summary(db, 2024)
        assert summary["total_expenses"] == 12 * 5000000 + 700000
        by_type = {row["type"]: (row["total"], row["count"]) for row in summary["by_type"]}
        assert by_type == {"facility": (60000000, 12), "marketing": (700000, 1)}
        assert len(summary["monthly_trend"]) == 12
        assert summary["monthly_trend"][5] == {"month": "2024-06", "total": 5700000}


def test_update_expense_turns_off_recurrence():
    with SessionLocal() as db:
        rent = create_category(db, name="Rent", type="facility")
        expense = create_expense(
            db,
            category_id=rent.id,
            amount=5000000,
            expense_date=date(2024, 1, 10),
            is_recurring=True,
            recurring_interval="monthly",
        )
        updated = update_expense(db, expense.id, is_recurring=False, description="Final month")
        assert updated.is_recurring is False
        assert updated.recurring_interval is None
        assert updated.description == "Final month"
        assert expense_total(db, ReportingWindow.for_month("2024-06")) == 0
