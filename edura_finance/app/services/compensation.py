"""Monthly tutor pay calculation under the three rate models."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, List, Optional, Sequence, Set, assert_never

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from edura_finance.app.core.constants import BILLING_STATUS_PENDING, SESSION_STATUS_COMPLETED
from edura_finance.app.core.errors import RecordNotFoundError
from edura_finance.app.models.session_record import SessionRecord
from edura_finance.app.models.tutor_payment import TutorPayment
from edura_finance.app.services.batch import BatchResult, ItemOutcome, fold_outcomes
from edura_finance.app.services.billing import apply_status_change, validate_payment_method, validate_status
from edura_finance.app.services.periods import BillingPeriod, parse_period
from edura_finance.app.services.rates import (
    HourlyRate,
    MonthlyFixedRate,
    PerStudentRate,
    RateTerms,
    find_rate,
    rate_terms,
    teachers_with_active_rates,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayoutComputation:
    amount: int
    sessions_count: int
    students_count: int


def session_minutes(session: SessionRecord) -> int:
    """Billable minutes for a session: the logged duration, else check-out minus check-in."""
    if session.actual_duration_minutes is not None:
        return max(int(session.actual_duration_minutes), 0)
    if session.check_in_time and session.check_out_time:
        delta = session.check_out_time - session.check_in_time
        return max(int(delta.total_seconds() // 60), 0)
    return 0


def _to_minor_units(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_payout(terms: RateTerms, sessions: Sequence[SessionRecord]) -> Optional[PayoutComputation]:
    """Return the payout for a month of valid sessions, or None when nothing is payable."""
    valid = [s for s in sessions if s.is_valid]
    if not valid:
        return None

    students = sum(int(s.student_count or 0) for s in valid)

    match terms:
        case HourlyRate(amount=rate):
            hours = sum((Decimal(session_minutes(s)) / Decimal("60") for s in valid), Decimal("0"))
            amount = _to_minor_units(hours * Decimal(rate))
        case PerStudentRate(amount=rate):
            amount = students * rate
        case MonthlyFixedRate(amount=rate):
            amount = rate
        case _:
            assert_never(terms)

    return PayoutComputation(amount=amount, sessions_count=len(valid), students_count=students)


def _sessions_for_month(db: Session, teacher_id: int, period: BillingPeriod) -> List[SessionRecord]:
    return (
        db.query(SessionRecord)
        .filter(
            SessionRecord.teacher_id == teacher_id,
            SessionRecord.status == SESSION_STATUS_COMPLETED,
            SessionRecord.session_date >= period.first_day,
            SessionRecord.session_date <= period.last_day,
        )
        .order_by(SessionRecord.session_date, SessionRecord.id)
        .all()
    )


def _existing_payment_teachers(db: Session, period: BillingPeriod) -> Set[int]:
    rows = db.query(TutorPayment.teacher_id).filter(TutorPayment.payment_month == period.key).all()
    return {row.teacher_id for row in rows}


def _teacher_outcome(db: Session, teacher_id: int, period: BillingPeriod) -> ItemOutcome:
    rate = find_rate(db, teacher_id, period.last_day)
    if rate is None:
        return ItemOutcome.failed(teacher_id, f"No rate in force for {period.key}")

    sessions = _sessions_for_month(db, teacher_id, period)
    payout = compute_payout(rate_terms(rate), sessions)
    if payout is None:
        logger.debug("Teacher %s has no valid sessions in %s; no payment created", teacher_id, period.key)
        return ItemOutcome.skipped(teacher_id, "no valid sessions")

    payment = TutorPayment(
        teacher_id=teacher_id,
        payment_month=period.key,
        amount=payout.amount,
        sessions_count=payout.sessions_count,
        students_count=payout.students_count,
        rate_id=rate.id,
        rate_type=rate.rate_type,
        status=BILLING_STATUS_PENDING,
    )
    try:
        db.add(payment)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.debug("Payment for teacher %s in %s already exists; skipping", teacher_id, period.key)
        return ItemOutcome.skipped(teacher_id, "already calculated")
    return ItemOutcome.created(teacher_id)


def _payment_outcomes(
    db: Session, teacher_ids: List[int], existing: Set[int], period: BillingPeriod
) -> Iterator[ItemOutcome]:
    for teacher_id in teacher_ids:
        if teacher_id in existing:
            yield ItemOutcome.skipped(teacher_id, "already calculated")
            continue
        yield _teacher_outcome(db, teacher_id, period)


def calculate_monthly_tutor_pay(db: Session, payment_month: str) -> BatchResult:
    """Create one pending payout per teacher with an active rate for ``payment_month``."""
    period = parse_period(payment_month)
    teacher_ids = teachers_with_active_rates(db)
    existing = _existing_payment_teachers(db, period)
    result = fold_outcomes(_payment_outcomes(db, teacher_ids, existing, period))
    logger.info(
        "Calculated tutor pay for %s: created=%s skipped=%s failed=%s",
        period.key,
        result.created,
        result.skipped,
        len(result.failed),
    )
    return result


def get_tutor_payment(db: Session, payment_id: int) -> TutorPayment:
    payment = db.query(TutorPayment).filter(TutorPayment.id == payment_id).first()
    if payment is None:
        raise RecordNotFoundError("Tutor payment", payment_id)
    return payment


def list_tutor_payments(
    db: Session,
    status: Optional[str] = None,
    payment_month: Optional[str] = None,
    teacher_id: Optional[int] = None,
) -> List[TutorPayment]:
    query = db.query(TutorPayment).options(joinedload(TutorPayment.teacher))
    if status is not None:
        validate_status(status)
        query = query.filter(TutorPayment.status == status)
    if payment_month is not None:
        query = query.filter(TutorPayment.payment_month == parse_period(payment_month).key)
    if teacher_id is not None:
        query = query.filter(TutorPayment.teacher_id == teacher_id)
    return query.order_by(TutorPayment.created_at.desc(), TutorPayment.id.desc()).all()


def update_tutor_payment_status(
    db: Session,
    payment_id: int,
    status: str,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TutorPayment:
    validate_status(status)
    validate_payment_method(payment_method)
    payment = get_tutor_payment(db, payment_id)
    apply_status_change(payment, status, payment_method=payment_method, notes=notes, now=now)
    db.commit()
    db.refresh(payment)
    logger.info("Tutor payment %s for teacher %s marked %s", payment.id, payment.teacher_id, status)
    return payment
