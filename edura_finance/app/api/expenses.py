"""Expense and expense category endpoints (manager only)."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from edura_finance.app.core.security import get_current_manager
from edura_finance.app.db.session import get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryRead,
    ExpenseCreate,
    ExpenseRead,
    ExpenseUpdate,
)
from edura_finance.app.services import expenses as expense_service

router = APIRouter(tags=["expenses"])


@router.get("/expense-categories", response_model=List[ExpenseCategoryRead])
async def list_expense_categories(
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return expense_service.list_categories(db)


@router.post("/expense-categories", response_model=ExpenseCategoryRead, status_code=status.HTTP_201_CREATED)
async def create_expense_category(
    category_in: ExpenseCategoryCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return expense_service.create_category(db, name=category_in.name, type=category_in.type)


@router.delete("/expense-categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    expense_service.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/expenses", response_model=List[ExpenseRead])
async def list_expenses(
    category_id: int | None = None,
    category_type: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    is_recurring: bool | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return expense_service.list_expenses(
        db,
        category_id=category_id,
        category_type=category_type,
        start_date=start_date,
        end_date=end_date,
        is_recurring=is_recurring,
    )


@router.post("/expenses", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return expense_service.create_expense(db, **expense_in.model_dump())


@router.get("/expenses/{expense_id}", response_model=ExpenseRead)
async def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return expense_service.get_expense(db, expense_id)


@router.patch("/expenses/{expense_id}", response_model=ExpenseRead)
async def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    # Only fields present in the request body are applied
    return expense_service.update_expense(db, expense_id, **payload.model_dump(exclude_unset=True))


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    expense_service.delete_expense(db, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
