"""Billing overviews for the signed-in teacher's classes."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from edura_finance.app.core.security import get_current_teacher
from edura_finance.app.db.session import get_db
from edura_finance.app.models.user import User
from edura_finance.app.schemas.teacher_billing import StudentPaymentStatus, TeacherBillingOverview
from edura_finance.app.services.teacher_billing import teacher_billing_overview, teacher_student_payment_status

router = APIRouter(prefix="/teacher/billing", tags=["teacher-billing"])


@router.get("/overview", response_model=TeacherBillingOverview)
async def get_overview(
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    return teacher_billing_overview(db, current_teacher.id)


@router.get("/students", response_model=List[StudentPaymentStatus])
async def get_student_payment_status(
    class_id: int | None = None,
    db: Session = Depends(get_db),
    current_teacher: User = Depends(get_current_teacher),
):
    return teacher_student_payment_status(db, current_teacher.id, class_id)
