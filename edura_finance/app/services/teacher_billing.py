"""Billing views for a teacher's own classes."""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from edura_finance.app.core.constants import BILLING_STATUS_PAID, UNPAID_STATUSES
from edura_finance.app.models.enrollment import Enrollment
from edura_finance.app.models.school_class import SchoolClass
from edura_finance.app.models.tuition_billing import TuitionBilling
from edura_finance.app.models.user import User


def teacher_billing_overview(db: Session, teacher_id: int) -> dict:
    """Paid and outstanding tuition per class taught by ``teacher_id``.

    Outstanding covers both pending and overdue invoices; cancelled ones are
    left out of every figure.
    """
    classes = (
        db.query(SchoolClass)
        .filter(SchoolClass.teacher_id == teacher_id)
        .order_by(SchoolClass.id)
        .all()
    )
    class_ids = [c.id for c in classes]
    stats: Dict[Tuple[int, str], Tuple[int, int]] = {}
    if class_ids:
        rows = (
            db.query(
                TuitionBilling.class_id,
                TuitionBilling.status,
                func.coalesce(func.sum(TuitionBilling.amount), 0),
                func.count(TuitionBilling.id),
            )
            .filter(TuitionBilling.class_id.in_(class_ids))
            .group_by(TuitionBilling.class_id, TuitionBilling.status)
            .all()
        )
        stats = {(class_id, status): (int(total), int(count)) for class_id, status, total, count in rows}

    class_billings = []
    for school_class in classes:
        paid_amount, paid_count = stats.get((school_class.id, BILLING_STATUS_PAID), (0, 0))
        pending_amount = sum(stats.get((school_class.id, s), (0, 0))[0] for s in UNPAID_STATUSES)
        pending_count = sum(stats.get((school_class.id, s), (0, 0))[1] for s in UNPAID_STATUSES)
        class_billings.append(
            {
                "class_id": school_class.id,
                "class_name": school_class.class_name,
                "tuition_rate": school_class.tuition_rate,
                "paid_amount": paid_amount,
                "paid_count": paid_count,
                "pending_amount": pending_amount,
                "pending_count": pending_count,
            }
        )

    paid_revenue = sum(c["paid_amount"] for c in class_billings)
    pending_revenue = sum(c["pending_amount"] for c in class_billings)
    return {
        "total_revenue": paid_revenue + pending_revenue,
        "paid_revenue": paid_revenue,
        "pending_revenue": pending_revenue,
        "class_billings": class_billings,
    }


def teacher_student_payment_status(
    db: Session, teacher_id: int, class_id: Optional[int] = None
) -> List[dict]:
    """One row per enrolled student in the teacher's classes with bill counts and amount due."""
    unpaid = TuitionBilling.status.in_(UNPAID_STATUSES)
    query = (
        db.query(
            User.id.label("student_id"),
            User.full_name.label("student_name"),
            User.email.label("student_email"),
            SchoolClass.id.label("class_id"),
            SchoolClass.class_name.label("class_name"),
            func.count(case((unpaid, 1))).label("pending_bills"),
            func.count(case((TuitionBilling.status == BILLING_STATUS_PAID, 1))).label("paid_bills"),
            func.coalesce(func.sum(case((unpaid, TuitionBilling.amount), else_=0)), 0).label("total_due"),
        )
        .select_from(Enrollment)
        .join(SchoolClass, Enrollment.class_id == SchoolClass.id)
        .join(User, Enrollment.student_id == User.id)
        .outerjoin(
            TuitionBilling,
            and_(TuitionBilling.student_id == User.id, TuitionBilling.class_id == SchoolClass.id),
        )
        .filter(SchoolClass.teacher_id == teacher_id)
    )
    if class_id is not None:
        query = query.filter(SchoolClass.id == class_id)
    rows = (
        query.group_by(User.id, User.full_name, User.email, SchoolClass.id, SchoolClass.class_name)
        .order_by(SchoolClass.id, User.id)
        .all()
    )
    return [
        {
            **row._asdict(),
            "pending_bills": int(row.pending_bills),
            "paid_bills": int(row.paid_bills),
            "total_due": int(row.total_due),
        }
        for row in rows
    ]
