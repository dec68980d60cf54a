"""Overdue tuition aging."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, List

from sqlalchemy.orm import Session, joinedload

from edura_finance.app.core.constants import UNPAID_STATUSES
from edura_finance.app.models.tuition_billing import TuitionBilling

AGING_BUCKETS = ("1-30", "31-60", "61-90", "90+")


@dataclass(frozen=True)
class AgedBilling:
    billing: TuitionBilling
    days_overdue: int
    bucket: str


@dataclass(frozen=True)
class AgingBucketTotal:
    bucket: str
    total: int
    count: int


@dataclass(frozen=True)
class AgingSummary:
    as_of: date
    buckets: List[AgingBucketTotal]
    total_overdue_amount: int
    total_overdue_count: int


def bucket_for_days(days_overdue: int) -> str:
    if days_overdue < 1:
        raise ValueError(f"Not overdue: {days_overdue} day(s)")
    if days_overdue <= 30:
        return "1-30"
    if days_overdue <= 60:
        return "31-60"
    if days_overdue <= 90:
        return "61-90"
    return "90+"


def classify_overdue(db: Session, as_of: date) -> List[AgedBilling]:
    """Unpaid invoices due strictly before ``as_of``, oldest first."""
    billings = (
        db.query(TuitionBilling)
        .options(joinedload(TuitionBilling.student), joinedload(TuitionBilling.school_class))
        .filter(TuitionBilling.status.in_(UNPAID_STATUSES), TuitionBilling.due_date < as_of)
        .order_by(TuitionBilling.due_date, TuitionBilling.id)
        .all()
    )
    aged = []
    for billing in billings:
        days = (as_of - billing.due_date).days
        aged.append(AgedBilling(billing=billing, days_overdue=days, bucket=bucket_for_days(days)))
    return aged


def summarize_aging(items: List[AgedBilling], as_of: date) -> AgingSummary:
    totals: Dict[str, List[int]] = {bucket: [0, 0] for bucket in AGING_BUCKETS}
    for item in items:
        totals[item.bucket][0] += int(item.billing.amount)
        totals[item.bucket][1] += 1
    buckets = [AgingBucketTotal(bucket=b, total=totals[b][0], count=totals[b][1]) for b in AGING_BUCKETS]
    return AgingSummary(
        as_of=as_of,
        buckets=buckets,
        total_overdue_amount=sum(int(item.billing.amount) for item in items),
        total_overdue_count=len(items),
    )


def get_aging_summary(db: Session, as_of: date) -> AgingSummary:
    return summarize_aging(classify_overdue(db, as_of), as_of)
