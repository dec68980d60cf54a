"""Teacher rate history endpoints (manager only)."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from edura_finance.app.core.security import get_current_manager
from edura_finance.app.db.session import get_db
from edura_finance.app.models.teacher_rate import TeacherRate
from edura_finance.app.models.user import User
from edura_finance.app.schemas.teacher_rate import TeacherRateCreate, TeacherRateRead, TeacherRateUpdate
from edura_finance.app.services.rates import (
    create_rate,
    deactivate_rate,
    list_rates,
    rate_usage_count,
    resolve_rate,
    update_rate,
)

router = APIRouter(prefix="/teacher-rates", tags=["teacher-rates"])


def _with_usage(db: Session, rate: TeacherRate) -> TeacherRateRead:
    read = TeacherRateRead.model_validate(rate)
    read.usage_count = rate_usage_count(db, rate.id)
    return read


@router.get("/", response_model=List[TeacherRateRead])
async def list_teacher_rates(
    teacher_id: int | None = None,
    active_only: bool = True,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return [_with_usage(db, rate) for rate in list_rates(db, teacher_id=teacher_id, active_only=active_only)]


@router.post("/", response_model=TeacherRateRead, status_code=status.HTTP_201_CREATED)
async def create_teacher_rate(
    rate_in: TeacherRateCreate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    rate = create_rate(
        db,
        teacher_id=rate_in.teacher_id,
        rate_type=rate_in.rate_type,
        amount=rate_in.amount,
        effective_date=rate_in.effective_date,
    )
    return _with_usage(db, rate)


@router.get("/resolve", response_model=TeacherRateRead)
async def resolve_teacher_rate(
    teacher_id: int,
    on_date: date,
    rate_type: str | None = None,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return _with_usage(db, resolve_rate(db, teacher_id, on_date, rate_type))


@router.patch("/{rate_id}", response_model=TeacherRateRead)
async def update_teacher_rate(
    rate_id: int,
    payload: TeacherRateUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    rate = update_rate(db, rate_id, amount=payload.amount, effective_date=payload.effective_date)
    return _with_usage(db, rate)


@router.post("/{rate_id}/deactivate", response_model=TeacherRateRead)
async def deactivate_teacher_rate(
    rate_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    return _with_usage(db, deactivate_rate(db, rate_id))
