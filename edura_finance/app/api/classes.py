"""Class tuition configuration (manager only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from edura_finance.app.core.errors import FinanceValidationError, RecordNotFoundError
from edura_finance.app.core.security import get_current_manager
from edura_finance.app.db.session import get_db
from edura_finance.app.models.school_class import SchoolClass
from edura_finance.app.models.user import User
from edura_finance.app.schemas.school_class import SchoolClassRead, TuitionRateUpdate

router = APIRouter(prefix="/classes", tags=["classes"])


@router.get("/{class_id}", response_model=SchoolClassRead)
async def get_class(
    class_id: int,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    school_class = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if school_class is None:
        raise RecordNotFoundError("Class", class_id)
    return school_class


@router.patch("/{class_id}/tuition-rate", response_model=SchoolClassRead)
async def set_tuition_rate(
    class_id: int,
    payload: TuitionRateUpdate,
    db: Session = Depends(get_db),
    current_manager: User = Depends(get_current_manager),
):
    if payload.tuition_rate <= 0:
        raise FinanceValidationError("Tuition rate must be positive")
    school_class = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if school_class is None:
        raise RecordNotFoundError("Class", class_id)
    # Existing invoices keep the amount they were issued with
    school_class.tuition_rate = payload.tuition_rate
    db.commit()
    db.refresh(school_class)
    return school_class
