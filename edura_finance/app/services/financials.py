"""Period-based financial read models: collection, cash flow, profitability.

Everything here is read-only. Tuition is attributed to its billing month and
tutor wages to their payment month; expenses are expanded per occurrence.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from edura_finance.app.core.constants import (
    BILLING_STATUS_CANCELLED,
    BILLING_STATUS_PAID,
    BILLING_STATUS_PENDING,
    UNPAID_STATUSES,
)
from edura_finance.app.core.time import utc_today
from edura_finance.app.models.enrollment import Enrollment
from edura_finance.app.models.school_class import SchoolClass
from edura_finance.app.models.tuition_billing import TuitionBilling
from edura_finance.app.models.tutor_payment import TutorPayment
from edura_finance.app.services.expenses import expense_total, expense_totals_by_month
from edura_finance.app.services.periods import ReportingWindow, parse_period, period_of


def _rounded_ratio(numerator: int, denominator: int) -> int:
    if not denominator:
        return 0
    value = Decimal(numerator) / Decimal(denominator)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """Rounded ``part / whole * 100``; 0 when ``whole`` is 0."""
    return _rounded_ratio(part * 100, whole)


def _window_filter(column, window: Optional[ReportingWindow]):
    if window is None:
        return []
    return [column >= window.start.key, column <= window.end.key]


def _sum(db: Session, column, *criteria) -> int:
    return int(db.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar() or 0)


def paid_tuition_total(db: Session, window: Optional[ReportingWindow] = None) -> int:
    return _sum(
        db,
        TuitionBilling.amount,
        TuitionBilling.status == BILLING_STATUS_PAID,
        *_window_filter(TuitionBilling.billing_month, window),
    )


def paid_tutor_wages_total(db: Session, window: Optional[ReportingWindow] = None) -> int:
    return _sum(
        db,
        TutorPayment.amount,
        TutorPayment.status == BILLING_STATUS_PAID,
        *_window_filter(TutorPayment.payment_month, window),
    )


def collection_metrics(db: Session, window: Optional[ReportingWindow] = None) -> dict:
    period_filter = _window_filter(TuitionBilling.billing_month, window)
    total_billed = _sum(db, TuitionBilling.amount, TuitionBilling.status != BILLING_STATUS_CANCELLED, *period_filter)
    total_collected = _sum(db, TuitionBilling.amount, TuitionBilling.status == BILLING_STATUS_PAID, *period_filter)
    rate = min(max(percentage(total_collected, total_billed), 0), 100)

    methods = (
        db.query(
            TuitionBilling.payment_method,
            func.count(TuitionBilling.id),
            func.coalesce(func.sum(TuitionBilling.amount), 0),
        )
        .filter(TuitionBilling.status == BILLING_STATUS_PAID, *period_filter)
        .group_by(TuitionBilling.payment_method)
        .all()
    )
    distribution = sorted(
        (
            {"method": method or "unknown", "count": int(count), "amount": int(amount)}
            for method, count, amount in methods
        ),
        key=lambda row: row["method"],
    )

    return {
        "start_month": window.start.key if window else None,
        "end_month": window.end.key if window else None,
        "total_billed": total_billed,
        "total_collected": total_collected,
        "collection_rate": rate,
        "payment_method_distribution": distribution,
    }


def _grouped_paid_totals(db: Session, key_column, amount_column, status_column, window: ReportingWindow) -> Dict[str, int]:
    rows = (
        db.query(key_column, func.coalesce(func.sum(amount_column), 0))
        .filter(status_column == BILLING_STATUS_PAID, *_window_filter(key_column, window))
        .group_by(key_column)
        .all()
    )
    return {key: int(total) for key, total in rows}


def _cash_flow_row(month: str, inflow: int, tutor_wages: int, expenses: int) -> dict:
    total_outflow = tutor_wages + expenses
    return {
        "month": month,
        "inflow": inflow,
        "tutor_wages": tutor_wages,
        "expenses": expenses,
        "total_outflow": total_outflow,
        "net_cash_flow": inflow - total_outflow,
    }


def monthly_cash_flow(db: Session, month: str) -> dict:
    window = ReportingWindow.for_month(month)
    return _cash_flow_row(
        window.start.key,
        paid_tuition_total(db, window),
        paid_tutor_wages_total(db, window),
        expense_total(db, window),
    )


def projected_revenue(db: Session) -> dict:
    """Forward estimate from current tuition rates over all enrollments."""
    monthly = int(
        db.query(func.coalesce(func.sum(SchoolClass.tuition_rate), 0))
        .select_from(Enrollment)
        .join(SchoolClass, Enrollment.class_id == SchoolClass.id)
        .scalar()
        or 0
    )
    return {"projected_monthly_revenue": monthly, "projected_annual_revenue": monthly * 12}


def cash_flow_summary(db: Session, year: int) -> dict:
    window = ReportingWindow.for_year(year)
    inflow = _grouped_paid_totals(
        db, TuitionBilling.billing_month, TuitionBilling.amount, TuitionBilling.status, window
    )
    wages = _grouped_paid_totals(db, TutorPayment.payment_month, TutorPayment.amount, TutorPayment.status, window)
    expenses = expense_totals_by_month(db, window)

    months = [
        _cash_flow_row(key, inflow.get(key, 0), wages.get(key, 0), expenses.get(key, 0)) for key in window.keys()
    ]
    total_inflow = sum(m["inflow"] for m in months)
    total_outflow = sum(m["total_outflow"] for m in months)
    projection = projected_revenue(db)

    return {
        "year": year,
        "monthly_data": months,
        "total_inflow": total_inflow,
        "total_outflow": total_outflow,
        "total_net_cash_flow": total_inflow - total_outflow,
        **projection,
    }


def active_student_count(db: Session) -> int:
    return int(db.query(func.count(func.distinct(Enrollment.student_id))).scalar() or 0)


def profitability(db: Session, window: ReportingWindow) -> dict:
    total_revenue = paid_tuition_total(db, window)
    total_teacher_cost = paid_tutor_wages_total(db, window)
    total_expenses = expense_total(db, window)
    net_profit = total_revenue - total_teacher_cost - total_expenses

    students = active_student_count(db)
    revenue_per_student = _rounded_ratio(total_revenue, students)

    class_rows = (
        db.query(TuitionBilling.class_id, SchoolClass.class_name, func.coalesce(func.sum(TuitionBilling.amount), 0))
        .outerjoin(SchoolClass, TuitionBilling.class_id == SchoolClass.id)
        .filter(TuitionBilling.status == BILLING_STATUS_PAID, *_window_filter(TuitionBilling.billing_month, window))
        .group_by(TuitionBilling.class_id, SchoolClass.class_name)
        .order_by(TuitionBilling.class_id)
        .all()
    )
    revenue_by_class = [
        {"class_id": class_id, "class_name": class_name or "Unknown", "revenue": int(revenue)}
        for class_id, class_name, revenue in class_rows
    ]
    class_count = len(revenue_by_class)

    return {
        "start_month": window.start.key,
        "end_month": window.end.key,
        "total_revenue": total_revenue,
        "total_teacher_cost": total_teacher_cost,
        "total_expenses": total_expenses,
        "net_profit": net_profit,
        "net_profit_margin": percentage(net_profit, total_revenue),
        "teacher_cost_ratio": percentage(total_teacher_cost, total_revenue),
        "active_student_count": students,
        "revenue_per_student": revenue_per_student,
        "class_count": class_count,
        "avg_revenue_per_class": _rounded_ratio(total_revenue, class_count),
        "revenue_by_class": revenue_by_class,
    }


def financial_summary(db: Session, today: date) -> dict:
    """Dashboard headline figures and the per-month billing trend."""
    current_month = period_of(today).key
    outstanding_total = _sum(db, TuitionBilling.amount, TuitionBilling.status.in_(UNPAID_STATUSES))
    outstanding_count = int(
        db.query(func.count(TuitionBilling.id)).filter(TuitionBilling.status.in_(UNPAID_STATUSES)).scalar() or 0
    )
    pending_tutor_total = _sum(db, TutorPayment.amount, TutorPayment.status == BILLING_STATUS_PENDING)
    pending_tutor_count = int(
        db.query(func.count(TutorPayment.id)).filter(TutorPayment.status == BILLING_STATUS_PENDING).scalar() or 0
    )

    billings = db.query(TuitionBilling.billing_month, TuitionBilling.status, TuitionBilling.amount).all()
    trend: Dict[str, Dict[str, int]] = {}
    for billing_month, status, amount in billings:
        entry = trend.setdefault(billing_month, {"revenue": 0, "outstanding": 0})
        if status == BILLING_STATUS_PAID:
            entry["revenue"] += int(amount)
        elif status in UNPAID_STATUSES:
            entry["outstanding"] += int(amount)
    monthly_trend: List[dict] = [{"month": key, **trend[key]} for key in sorted(trend)]

    return {
        "as_of": today.isoformat(),
        "total_revenue": paid_tuition_total(db),
        "outstanding_bills": outstanding_total,
        "outstanding_count": outstanding_count,
        "month_revenue": paid_tuition_total(db, ReportingWindow.for_month(current_month)),
        "pending_tutor_payments": pending_tutor_total,
        "pending_tutor_count": pending_tutor_count,
        "monthly_trend": monthly_trend,
    }


def window_from_params(
    month: Optional[str] = None,
    year: Optional[int] = None,
    start_month: Optional[str] = None,
    end_month: Optional[str] = None,
    today: Optional[date] = None,
) -> ReportingWindow:
    """Resolve the query-string forms accepted by the reporting routes into a window."""
    if month:
        return ReportingWindow.for_month(month)
    if start_month or end_month:
        start = parse_period(start_month) if start_month else parse_period(end_month)
        end = parse_period(end_month) if end_month else start
        return ReportingWindow(start, end)
    if year is not None:
        return ReportingWindow.for_year(year)
    return ReportingWindow.for_year((today or utc_today()).year)
