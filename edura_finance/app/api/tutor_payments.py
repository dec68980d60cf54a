"""Tutor payment endpoints (manager only)."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from edura_finance.app.core.security import get_current_manager
from edura_finance.app.db.session import get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.billing import BatchResultRead, StatusUpdate
from edura_finance.app.schemas.tutor_payment import TutorPayCalculateRequest, TutorPaymentRead
from edura_finance.app.services.compensation import (
    calculate_monthly_tutor_pay,
    list_tutor_payments,
    update_tutor_payment_status,
)

router = APIRouter(prefix="/tutor-payments", tags=["tutor-payments"])


@router.post("/calculate", response_model=BatchResultRead, status_code=status.HTTP_201_CREATED)
async def calculate_tutor_pay(
    payload: TutorPayCalculateRequest,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return calculate_monthly_tutor_pay(db, payload.payment_month).as_dict()


@router.get("/", response_model=List[TutorPaymentRead])
async def list_payments(
    status: str | None = None,
    payment_month: str | None = None,
    teacher_id: int | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return list_tutor_payments(db, status=status, payment_month=payment_month, teacher_id=teacher_id)


@router.patch("/{payment_id}/status", response_model=TutorPaymentRead)
async def update_payment_status(
    payment_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return update_tutor_payment_status(
        db, payment_id, payload.status, payment_method=payload.payment_method, notes=payload.notes
    )
