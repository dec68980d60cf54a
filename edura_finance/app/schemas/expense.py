"""Expense and expense category schemas."""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

CategoryType = Literal["facility", "marketing", "operational"]
RecurringInterval = Literal["monthly", "quarterly", "yearly"]


class ExpenseCategoryCreate(BaseModel):
    name: str
    type: CategoryType


class ExpenseCategoryRead(BaseModel):
    id: int
    name: str
    type: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExpenseCreate(BaseModel):
    category_id: int
    amount: int
    expense_date: date
    description: Optional[str] = None
    is_recurring: bool = False
    recurring_interval: Optional[RecurringInterval] = None


class ExpenseUpdate(BaseModel):
    category_id: Optional[int] = None
    amount: Optional[int] = None
    expense_date: Optional[date] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurring_interval: Optional[RecurringInterval] = None


class ExpenseRead(BaseModel):
    id: int
    category_id: int
    amount: int
    description: Optional[str]
    expense_date: date
    is_recurring: bool
    recurring_interval: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ExpenseTypeTotal(BaseModel):
    type: str
    total: int
    count: int


class ExpenseMonthTotal(BaseModel):
    month: str
    total: int


class ExpenseSummary(BaseModel):
    year: int
    total_expenses: int
    by_type: List[ExpenseTypeTotal]
    monthly_trend: List[ExpenseMonthTotal]
