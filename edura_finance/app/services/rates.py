"""Teacher rate history: effective-dated lookup and guarded edits.

Rates form an append-only log. The rate "in force" on a date is derived by
query, never stored: among active rows with ``effective_date <= on_date`` the
latest effective date wins. Rows referenced by a tutor payment are frozen;
callers append a new row instead of editing.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from edura_finance.app.core.constants import (
    RATE_TYPE_HOURLY,
    RATE_TYPE_MONTHLY_FIXED,
    RATE_TYPE_PER_STUDENT,
    RATE_TYPES,
)
from edura_finance.app.core.errors import FinanceValidationError, RateInUseError, RecordNotFoundError
from edura_finance.app.core.time import utc_today
from edura_finance.app.models.teacher_rate import TeacherRate
from edura_finance.app.models.tutor_payment import TutorPayment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HourlyRate:
    amount: int


@dataclass(frozen=True)
class PerStudentRate:
    amount: int


@dataclass(frozen=True)
class MonthlyFixedRate:
    amount: int


RateTerms = HourlyRate | PerStudentRate | MonthlyFixedRate

_TERMS_BY_TYPE = {
    RATE_TYPE_HOURLY: HourlyRate,
    RATE_TYPE_PER_STUDENT: PerStudentRate,
    RATE_TYPE_MONTHLY_FIXED: MonthlyFixedRate,
}


def rate_terms(rate: TeacherRate) -> RateTerms:
    """Convert a stored rate row into its tagged variant."""
    try:
        terms_cls = _TERMS_BY_TYPE[rate.rate_type]
    except KeyError:
        raise FinanceValidationError(f"Unknown rate type {rate.rate_type!r} on rate {rate.id}") from None
    return terms_cls(int(rate.amount))


def _validate_rate_type(rate_type: str) -> None:
    if rate_type not in RATE_TYPES:
        raise FinanceValidationError(f"Invalid rate type {rate_type!r}; expected one of {', '.join(RATE_TYPES)}")


def _validate_amount(amount: int) -> None:
    if amount is None or amount < 0:
        raise FinanceValidationError("Rate amount must be zero or greater")


def find_rate(
    db: Session,
    teacher_id: int,
    on_date: date,
    rate_type: Optional[str] = None,
) -> Optional[TeacherRate]:
    query = db.query(TeacherRate).filter(
        TeacherRate.teacher_id == teacher_id,
        TeacherRate.is_active.is_(True),
        TeacherRate.effective_date <= on_date,
    )
    if rate_type is not None:
        _validate_rate_type(rate_type)
        query = query.filter(TeacherRate.rate_type == rate_type)
    return query.order_by(TeacherRate.effective_date.desc(), TeacherRate.id.desc()).first()


def resolve_rate(
    db: Session,
    teacher_id: int,
    on_date: date,
    rate_type: Optional[str] = None,
) -> TeacherRate:
    """Return the rate in force for ``teacher_id`` on ``on_date`` or raise RecordNotFoundError."""
    rate = find_rate(db, teacher_id, on_date, rate_type)
    if rate is None:
        raise RecordNotFoundError("Teacher rate", f"for teacher {teacher_id} on {on_date.isoformat()}")
    return rate


def get_rate(db: Session, rate_id: int) -> TeacherRate:
    rate = db.query(TeacherRate).filter(TeacherRate.id == rate_id).first()
    if rate is None:
        raise RecordNotFoundError("Teacher rate", rate_id)
    return rate


def rate_usage_count(db: Session, rate_id: int) -> int:
    return db.query(func.count(TutorPayment.id)).filter(TutorPayment.rate_id == rate_id).scalar() or 0


def list_rates(db: Session, teacher_id: Optional[int] = None, active_only: bool = True) -> List[TeacherRate]:
    query = db.query(TeacherRate).options(joinedload(TeacherRate.teacher))
    if teacher_id is not None:
        query = query.filter(TeacherRate.teacher_id == teacher_id)
    if active_only:
        query = query.filter(TeacherRate.is_active.is_(True))
    return query.order_by(TeacherRate.effective_date.desc(), TeacherRate.id.desc()).all()


def create_rate(
    db: Session,
    *,
    teacher_id: int,
    rate_type: str,
    amount: int,
    effective_date: Optional[date] = None,
) -> TeacherRate:
    _validate_rate_type(rate_type)
    _validate_amount(amount)
    rate = TeacherRate(
        teacher_id=teacher_id,
        rate_type=rate_type,
        amount=amount,
        effective_date=effective_date or utc_today(),
        is_active=True,
    )
    db.add(rate)
    db.commit()
    db.refresh(rate)
    logger.info(
        "Created %s rate %s for teacher %s effective %s",
        rate.rate_type,
        rate.id,
        teacher_id,
        rate.effective_date.isoformat(),
    )
    return rate


def update_rate(
    db: Session,
    rate_id: int,
    *,
    amount: Optional[int] = None,
    effective_date: Optional[date] = None,
) -> TeacherRate:
    rate = get_rate(db, rate_id)
    usage = rate_usage_count(db, rate_id)
    if usage > 0:
        logger.warning("Rejected edit of rate %s referenced by %s payment(s)", rate_id, usage)
        raise RateInUseError(rate_id, usage)
    if amount is not None:
        _validate_amount(amount)
        rate.amount = amount
    if effective_date is not None:
        rate.effective_date = effective_date
    db.commit()
    db.refresh(rate)
    return rate


def deactivate_rate(db: Session, rate_id: int) -> TeacherRate:
    rate = get_rate(db, rate_id)
    rate.is_active = False
    db.commit()
    db.refresh(rate)
    logger.info("Deactivated rate %s for teacher %s", rate.id, rate.teacher_id)
    return rate


def teachers_with_active_rates(db: Session) -> List[int]:
    rows = (
        db.query(TeacherRate.teacher_id)
        .filter(TeacherRate.is_active.is_(True))
        .distinct()
        .order_by(TeacherRate.teacher_id)
        .all()
    )
    return [row.teacher_id for row in rows]
