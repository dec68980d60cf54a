"""Tuition billing endpoints (manager only)."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from edura_finance.app.core.security import get_current_manager
from edura_finance.app.core.time import utc_today
from edura_finance.app.db.session import get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.billing import (
    BatchResultRead,
    BillingGenerateRequest,
    MarkOverdueRequest,
    MarkOverdueResult,
    StatusUpdate,
    TuitionBillingRead,
)
from edura_finance.app.services.billing import (
    generate_monthly_billing,
    get_billing,
    list_billings,
    mark_overdue_billings,
    update_billing_status,
)

router = APIRouter(prefix="/billings", tags=["billings"])


@router.post("/generate", response_model=BatchResultRead, status_code=status.HTTP_201_CREATED)
async def generate_billings(
    payload: BillingGenerateRequest,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    result = generate_monthly_billing(db, payload.billing_month, payload.due_date, payload.class_ids)
    return result.as_dict()


@router.get("/", response_model=List[TuitionBillingRead])
async def list_tuition_billings(
    status: str | None = None,
    billing_month: str | None = None,
    class_id: int | None = None,
    student_id: int | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return list_billings(db, status=status, billing_month=billing_month, class_id=class_id, student_id=student_id)


@router.post("/mark-overdue", response_model=MarkOverdueResult)
async def mark_overdue(
    payload: MarkOverdueRequest,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    as_of: date = payload.as_of or utc_today()
    return {"as_of": as_of, "updated": mark_overdue_billings(db, as_of)}


@router.get("/{billing_id}", response_model=TuitionBillingRead)
async def get_tuition_billing(
    billing_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return get_billing(db, billing_id)


@router.patch("/{billing_id}/status", response_model=TuitionBillingRead)
async def update_tuition_billing_status(
    billing_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return update_billing_status(
        db, billing_id, payload.status, payment_method=payload.payment_method, notes=payload.notes
    )
