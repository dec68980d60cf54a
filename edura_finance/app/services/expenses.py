"""Expense categories, expenses and recurring-expense expansion.

Recurring expenses are stored once, at their anchor date. Reports expand
them into virtual occurrences for the requested window on every call.
"""

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from edura_finance.app.core.constants import EXPENSE_CATEGORY_TYPES, RECURRING_INTERVALS
from edura_finance.app.core.errors import CategoryInUseError, FinanceValidationError, RecordNotFoundError
from edura_finance.app.models.expense import Expense
from edura_finance.app.models.expense_category import ExpenseCategory
from edura_finance.app.services.periods import BillingPeriod, ReportingWindow, period_of

logger = logging.getLogger(__name__)

_INTERVAL_MONTHS = {"monthly": 1, "quarterly": 3, "yearly": 12}

_UNSET = object()


@dataclass(frozen=True)
class ExpenseOccurrence:
    expense_id: int
    category_id: int
    category_type: str | None
    occurs_on: date
    amount: int


def _clamp_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def expand_occurrences(expense: Expense, window_start: date, window_end: date) -> List[date]:
    """Dates on which ``expense`` applies within ``[window_start, window_end]``.

    Recurring occurrences fall on the anchor's day of month, clamped to the
    month's length, every 1/3/12 months from the anchor month onward.
    """
    anchor = expense.expense_date
    if window_end < window_start or anchor > window_end:
        return []
    if not expense.is_recurring:
        return [anchor] if window_start <= anchor <= window_end else []

    step = _INTERVAL_MONTHS.get(expense.recurring_interval)
    if step is None:
        raise FinanceValidationError(
            f"Expense {expense.id} is recurring with unknown interval {expense.recurring_interval!r}"
        )

    anchor_period = period_of(anchor)
    first = max(period_of(window_start), anchor_period)
    offset = first.months_since(anchor_period)
    if offset % step:
        first = first.shift(step - offset % step)

    dates = []
    current: BillingPeriod = first
    last = period_of(window_end)
    while current <= last:
        occurs_on = _clamp_day(current.year, current.month, anchor.day)
        if window_start <= occurs_on <= window_end:
            dates.append(occurs_on)
        current = current.shift(step)
    return dates


def expense_occurrences(db: Session, window: ReportingWindow) -> List[ExpenseOccurrence]:
    expenses = (
        db.query(Expense)
        .options(joinedload(Expense.category))
        .filter(Expense.expense_date <= window.last_day)
        .order_by(Expense.expense_date, Expense.id)
        .all()
    )
    occurrences = []
    for expense in expenses:
        category_type = expense.category.type if expense.category else None
        for occurs_on in expand_occurrences(expense, window.first_day, window.last_day):
            occurrences.append(
                ExpenseOccurrence(
                    expense_id=expense.id,
                    category_id=expense.category_id,
                    category_type=category_type,
                    occurs_on=occurs_on,
                    amount=int(expense.amount),
                )
            )
    occurrences.sort(key=lambda o: (o.occurs_on, o.expense_id))
    return occurrences


def expense_total(db: Session, window: ReportingWindow) -> int:
    return sum(o.amount for o in expense_occurrences(db, window))


def expense_totals_by_month(db: Session, window: ReportingWindow) -> Dict[str, int]:
    totals = {key: 0 for key in window.keys()}
    for occurrence in expense_occurrences(db, window):
        totals[period_of(occurrence.occurs_on).key] += occurrence.amount
    return totals


def expense_summary(db: Session, year: int) -> dict:
    window = ReportingWindow.for_year(year)
    occurrences = expense_occurrences(db, window)

    by_type: Dict[str, Dict[str, int]] = defaultdict(lambda: {"total": 0, "count": 0})
    monthly = {key: 0 for key in window.keys()}
    for occurrence in occurrences:
        entry = by_type[occurrence.category_type or "uncategorized"]
        entry["total"] += occurrence.amount
        entry["count"] += 1
        monthly[period_of(occurrence.occurs_on).key] += occurrence.amount

    return {
        "year": year,
        "total_expenses": sum(o.amount for o in occurrences),
        "by_type": [{"type": t, "total": v["total"], "count": v["count"]} for t, v in sorted(by_type.items())],
        "monthly_trend": [{"month": key, "total": total} for key, total in monthly.items()],
    }


# Categories


def list_categories(db: Session) -> List[ExpenseCategory]:
    return db.query(ExpenseCategory).order_by(ExpenseCategory.name, ExpenseCategory.id).all()


def get_category(db: Session, category_id: int) -> ExpenseCategory:
    category = db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first()
    if category is None:
        raise RecordNotFoundError("Expense category", category_id)
    return category


def create_category(db: Session, *, name: str, type: str) -> ExpenseCategory:
    if not name or not name.strip():
        raise FinanceValidationError("Category name is required")
    if type not in EXPENSE_CATEGORY_TYPES:
        raise FinanceValidationError(
            f"Invalid category type {type!r}; expected one of {', '.join(EXPENSE_CATEGORY_TYPES)}"
        )
    category = ExpenseCategory(name=name.strip(), type=type)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)
    in_use = db.query(func.count(Expense.id)).filter(Expense.category_id == category_id).scalar() or 0
    if in_use:
        raise CategoryInUseError(category_id, in_use)
    db.delete(category)
    db.commit()
    logger.info("Deleted expense category %s", category_id)


# Expenses


def _validate_recurrence(is_recurring: bool, recurring_interval: Optional[str]) -> None:
    if is_recurring and recurring_interval not in RECURRING_INTERVALS:
        raise FinanceValidationError(
            f"Recurring expenses need an interval: one of {', '.join(RECURRING_INTERVALS)}"
        )


def _validate_expense_amount(amount: int) -> None:
    if amount is None or amount <= 0:
        raise FinanceValidationError("Expense amount must be positive")


def get_expense(db: Session, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if expense is None:
        raise RecordNotFoundError("Expense", expense_id)
    return expense


def list_expenses(
    db: Session,
    category_id: Optional[int] = None,
    category_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    is_recurring: Optional[bool] = None,
) -> List[Expense]:
    query = db.query(Expense).join(ExpenseCategory, Expense.category_id == ExpenseCategory.id)
    if category_id is not None:
        query = query.filter(Expense.category_id == category_id)
    if category_type is not None:
        query = query.filter(ExpenseCategory.type == category_type)
    if start_date is not None:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date is not None:
        query = query.filter(Expense.expense_date <= end_date)
    if is_recurring is not None:
        query = query.filter(Expense.is_recurring.is_(is_recurring))
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).all()


def create_expense(
    db: Session,
    *,
    category_id: int,
    amount: int,
    expense_date: date,
    description: Optional[str] = None,
    is_recurring: bool = False,
    recurring_interval: Optional[str] = None,
) -> Expense:
    _validate_expense_amount(amount)
    _validate_recurrence(is_recurring, recurring_interval)
    get_category(db, category_id)
    expense = Expense(
        category_id=category_id,
        amount=amount,
        description=description,
        expense_date=expense_date,
        is_recurring=is_recurring,
        recurring_interval=recurring_interval if is_recurring else None,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def update_expense(
    db: Session,
    expense_id: int,
    *,
    category_id: Optional[int] = None,
    amount: Optional[int] = None,
    expense_date: Optional[date] = None,
    description=_UNSET,
    is_recurring: Optional[bool] = None,
    recurring_interval: Optional[str] = None,
) -> Expense:
    expense = get_expense(db, expense_id)
    if category_id is not None:
        get_category(db, category_id)
        expense.category_id = category_id
    if amount is not None:
        _validate_expense_amount(amount)
        expense.amount = amount
    if expense_date is not None:
        expense.expense_date = expense_date
    if description is not _UNSET:
        expense.description = description

    recurring = expense.is_recurring if is_recurring is None else is_recurring
    interval = recurring_interval if recurring_interval is not None else expense.recurring_interval
    _validate_recurrence(recurring, interval)
    expense.is_recurring = recurring
    expense.recurring_interval = interval if recurring else None

    db.commit()
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: int) -> None:
    expense = get_expense(db, expense_id)
    db.delete(expense)
    db.commit()
