"""Read-only financial reports for managers."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from edura_finance.app.core.security import get_current_manager
from edura_finance.app.core.settings import get_settings
from edura_finance.app.core.time import utc_today
from edura_finance.app.db.session import get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.expense import ExpenseSummary
from edura_finance.app.schemas.finance import (
    AgingSummaryRead,
    CashFlowMonth,
    CashFlowSummary,
    CollectionMetrics,
    FinancialSummary,
    OverdueBillingRead,
    Profitability,
)
from edura_finance.app.services.aging import classify_overdue, get_aging_summary
from edura_finance.app.services.expenses import expense_summary
from edura_finance.app.services.financials import (
    cash_flow_summary,
    collection_metrics,
    financial_summary,
    monthly_cash_flow,
    profitability,
    window_from_params,
)

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("/collection", response_model=CollectionMetrics)
async def get_collection_metrics(
    month: str | None = None,
    start_month: str | None = None,
    end_month: str | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    window = None
    if month or start_month or end_month:
        window = window_from_params(month=month, start_month=start_month, end_month=end_month)
    return collection_metrics(db, window)


@router.get("/aging", response_model=AgingSummaryRead)
async def get_aging(
    as_of: date | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    summary = get_aging_summary(db, as_of or utc_today())
    read = AgingSummaryRead.model_validate(summary)
    read.currency = get_settings().currency
    return read


@router.get("/overdue", response_model=List[OverdueBillingRead])
async def list_overdue(
    as_of: date | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return [
        OverdueBillingRead(
            billing_id=item.billing.id,
            student_id=item.billing.student_id,
            class_id=item.billing.class_id,
            invoice_number=item.billing.invoice_number,
            billing_month=item.billing.billing_month,
            amount=item.billing.amount,
            status=item.billing.status,
            due_date=item.billing.due_date,
            days_overdue=item.days_overdue,
            aging_bucket=item.bucket,
            student_name=item.billing.student_name,
            student_email=item.billing.student_email,
            class_name=item.billing.class_name,
            class_code=item.billing.class_code,
        )
        for item in classify_overdue(db, as_of or utc_today())
    ]


@router.get("/cash-flow", response_model=CashFlowSummary)
async def get_cash_flow(
    year: int | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return cash_flow_summary(db, year or utc_today().year)


@router.get("/cash-flow/{month}", response_model=CashFlowMonth)
async def get_monthly_cash_flow(
    month: str,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return monthly_cash_flow(db, month)


@router.get("/profitability", response_model=Profitability)
async def get_profitability(
    month: str | None = None,
    year: int | None = None,
    start_month: str | None = None,
    end_month: str | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    window = window_from_params(
        month=month, year=year, start_month=start_month, end_month=end_month, today=utc_today()
    )
    return profitability(db, window)


@router.get("/summary", response_model=FinancialSummary)
async def get_financial_summary(
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return financial_summary(db, utc_today())


@router.get("/expense-summary", response_model=ExpenseSummary)
async def get_expense_summary(
    year: int | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return expense_summary(db, year or utc_today().year)
