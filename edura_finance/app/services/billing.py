"""Monthly tuition billing generation and status transitions."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from edura_finance.app.core.constants import (
    BILLING_STATUS_OVERDUE,
    BILLING_STATUS_PAID,
    BILLING_STATUS_PENDING,
    BILLING_STATUSES,
    PAYMENT_METHODS,
)
from edura_finance.app.core.errors import FinanceValidationError, RecordNotFoundError
from edura_finance.app.core.time import utc_now
from edura_finance.app.models.enrollment import Enrollment
from edura_finance.app.models.school_class import SchoolClass
from edura_finance.app.models.tuition_billing import TuitionBilling
from edura_finance.app.services.batch import BatchResult, ItemOutcome, fold_outcomes
from edura_finance.app.services.periods import BillingPeriod, parse_period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingCandidate:
    enrollment_id: int
    student_id: int
    class_id: int
    tuition_rate: int | None


def format_invoice_number(period: BillingPeriod, billing_id: int) -> str:
    return f"INV-{period.year:04d}{period.month:02d}-{billing_id:06d}"


def _billing_candidates(
    db: Session, period: BillingPeriod, class_ids: Optional[Iterable[int]]
) -> List[BillingCandidate]:
    query = (
        db.query(Enrollment.id, Enrollment.student_id, Enrollment.class_id, SchoolClass.tuition_rate)
        .join(SchoolClass, Enrollment.class_id == SchoolClass.id)
        .filter(Enrollment.enrolled_at <= period.last_day)
    )
    if class_ids:
        query = query.filter(Enrollment.class_id.in_(list(class_ids)))
    rows = query.order_by(Enrollment.id).all()
    return [BillingCandidate(row[0], row[1], row[2], row[3]) for row in rows]


def _existing_billing_keys(db: Session, period: BillingPeriod) -> Set[Tuple[int, int]]:
    rows = (
        db.query(TuitionBilling.student_id, TuitionBilling.class_id)
        .filter(TuitionBilling.billing_month == period.key)
        .all()
    )
    return {(row.student_id, row.class_id) for row in rows}


def _insert_billing(
    db: Session, candidate: BillingCandidate, period: BillingPeriod, due_date: date
) -> ItemOutcome:
    billing = TuitionBilling(
        student_id=candidate.student_id,
        class_id=candidate.class_id,
        billing_month=period.key,
        amount=candidate.tuition_rate,
        status=BILLING_STATUS_PENDING,
        due_date=due_date,
    )
    try:
        db.add(billing)
        db.flush()  # obtain billing id for the invoice number
        billing.invoice_number = format_invoice_number(period, billing.id)
        db.commit()
    except IntegrityError:
        # Another run inserted the same (student, class, month) first.
        db.rollback()
        logger.debug(
            "Billing for student %s class %s in %s already exists; skipping",
            candidate.student_id,
            candidate.class_id,
            period.key,
        )
        return ItemOutcome.skipped(candidate.enrollment_id, "already billed")
    return ItemOutcome.created(candidate.enrollment_id)


def _billing_outcomes(
    db: Session,
    candidates: List[BillingCandidate],
    existing: Set[Tuple[int, int]],
    period: BillingPeriod,
    due_date: date,
) -> Iterator[ItemOutcome]:
    for candidate in candidates:
        if (candidate.student_id, candidate.class_id) in existing:
            yield ItemOutcome.skipped(candidate.enrollment_id, "already billed")
            continue
        if candidate.tuition_rate is None or candidate.tuition_rate <= 0:
            logger.warning(
                "Enrollment %s skipped: class %s has no tuition rate", candidate.enrollment_id, candidate.class_id
            )
            yield ItemOutcome.failed(candidate.enrollment_id, f"Class {candidate.class_id} has no tuition rate set")
            continue
        yield _insert_billing(db, candidate, period, due_date)


def generate_monthly_billing(
    db: Session,
    billing_month: str,
    due_date: date | None,
    class_ids: Optional[Iterable[int]] = None,
) -> BatchResult:
    """Create one pending invoice per enrollment for ``billing_month``.

    Safe to call repeatedly: existing invoices are counted as skipped, and a
    unique-constraint violation during insert (a concurrent run got there
    first) is also a skip rather than an error.
    """
    period = parse_period(billing_month)
    if due_date is None:
        raise FinanceValidationError("Due date is required")

    candidates = _billing_candidates(db, period, class_ids)
    existing = _existing_billing_keys(db, period)
    result = fold_outcomes(_billing_outcomes(db, candidates, existing, period, due_date))

    logger.info(
        "Generated tuition billing for %s: created=%s skipped=%s failed=%s",
        period.key,
        result.created,
        result.skipped,
        len(result.failed),
    )
    return result


def _billing_query(db: Session):
    # Names on invoice views come from the student, class and class teacher
    return db.query(TuitionBilling).options(
        joinedload(TuitionBilling.student),
        joinedload(TuitionBilling.school_class).joinedload(SchoolClass.teacher),
    )


def get_billing(db: Session, billing_id: int) -> TuitionBilling:
    billing = _billing_query(db).filter(TuitionBilling.id == billing_id).first()
    if billing is None:
        raise RecordNotFoundError("Billing", billing_id)
    return billing


def list_billings(
    db: Session,
    status: Optional[str] = None,
    billing_month: Optional[str] = None,
    class_id: Optional[int] = None,
    student_id: Optional[int] = None,
) -> List[TuitionBilling]:
    query = _billing_query(db)
    if status is not None:
        validate_status(status)
        query = query.filter(TuitionBilling.status == status)
    if billing_month is not None:
        query = query.filter(TuitionBilling.billing_month == parse_period(billing_month).key)
    if class_id is not None:
        query = query.filter(TuitionBilling.class_id == class_id)
    if student_id is not None:
        query = query.filter(TuitionBilling.student_id == student_id)
    return query.order_by(TuitionBilling.created_at.desc(), TuitionBilling.id.desc()).all()


def validate_status(status: str) -> None:
    if status not in BILLING_STATUSES:
        raise FinanceValidationError(f"Invalid status {status!r}; expected one of {', '.join(BILLING_STATUSES)}")


def validate_payment_method(method: Optional[str]) -> None:
    if method is not None and method not in PAYMENT_METHODS:
        raise FinanceValidationError(
            f"Invalid payment method {method!r}; expected one of {', '.join(PAYMENT_METHODS)}"
        )


def apply_status_change(
    record,
    status: str,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """Set status on a billing or tutor payment; leaving ``paid`` clears the payment stamp."""
    validate_status(status)
    validate_payment_method(payment_method)
    record.status = status
    if status == BILLING_STATUS_PAID:
        record.paid_at = now or utc_now()
        if payment_method is not None:
            record.payment_method = payment_method
    else:
        record.paid_at = None
        record.payment_method = None
    if notes is not None:
        record.notes = notes


def update_billing_status(
    db: Session,
    billing_id: int,
    status: str,
    payment_method: Optional[str] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TuitionBilling:
    validate_status(status)
    validate_payment_method(payment_method)
    billing = get_billing(db, billing_id)
    apply_status_change(billing, status, payment_method=payment_method, notes=notes, now=now)
    db.commit()
    db.refresh(billing)
    logger.info("Billing %s (%s) marked %s", billing.id, billing.invoice_number, status)
    return billing


def mark_overdue_billings(db: Session, as_of: date) -> int:
    """Move pending invoices whose due date has passed to ``overdue``."""
    billings = (
        db.query(TuitionBilling)
        .filter(TuitionBilling.status == BILLING_STATUS_PENDING, TuitionBilling.due_date < as_of)
        .all()
    )
    for billing in billings:
        billing.status = BILLING_STATUS_OVERDUE
    db.commit()
    if billings:
        logger.info("Marked %s billing(s) overdue as of %s", len(billings), as_of.isoformat())
    return len(billings)
