from datetime import date, datetime, timezone

import pytest

from edura_finance.app.core.errors import FinanceValidationError, PeriodValidationError, RecordNotFoundError
from edura_finance.app.db.base import Base
from edura_finance.app.db.session import SessionLocal, engine
from edura_finance.app.models.enrollment import Enrollment
from edura_finance.app.models.school_class import SchoolClass
from edura_finance.app.models.tuition_billing import TuitionBilling
from edura_finance.app.models.user import User
from edura_finance.app.services import billing as billing_service
from edura_finance.app.services.billing import (
    generate_monthly_billing,
    get_billing,
    list_billings,
    mark_overdue_billings,
    update_billing_status,
)

DUE = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create_class(db, code, tuition_rate=1500000):
    school_class = SchoolClass(class_name=f"Class {code}", class_code=code, tuition_rate=tuition_rate)
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    return school_class


def _enroll(db, school_class, email, enrolled_at=date(2024, 1, 1)):
    student = User(email=email, hashed_password="x", role="student")
    db.add(student)
    db.commit()
    db.refresh(student)
    enrollment = Enrollment(student_id=student.id, class_id=school_class.id, enrolled_at=enrolled_at)
    db.add(enrollment)
    db.commit()
    return student


def test_generation_creates_one_invoice_per_enrollment():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        for i in range(3):
            _enroll(db, math, f"s{i}@example.com")

        result = generate_monthly_billing(db, "2024-03", DUE)

        assert (result.created, result.skipped, result.failed) == (3, 0, ())
        billings = db.query(TuitionBilling).all()
        assert len(billings) == 3
        for billing in billings:
            assert billing.amount == 1500000
            assert billing.status == "pending"
            assert billing.billing_month == "2024-03"
            assert billing.due_date == DUE
            assert billing.invoice_number == f"INV-202403-{billing.id:06d}"


def test_second_run_skips_everything():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        _enroll(db, math, "a@example.com")
        _enroll(db, math, "b@example.com")

        first = generate_monthly_billing(db, "2024-03", DUE)
        second = generate_monthly_billing(db, "2024-03", DUE)

        assert first.created == 2
        assert (second.created, second.skipped) == (0, 2)
        assert db.query(TuitionBilling).count() == 2


def test_class_without_tuition_is_reported_and_others_still_billed():
    with SessionLocal() as db:
        priced = _create_class(db, "PRICED")
        unpriced = _create_class(db, "FREE", tuition_rate=None)
        _enroll(db, priced, "a@example.com")
        _enroll(db, unpriced, "b@example.com")

        result = generate_monthly_billing(db, "2024-03", DUE)

        assert result.created == 1
        assert len(result.failed) == 1
        assert result.failed[0].reason == f"Class {unpriced.id} has no tuition rate set"
        assert db.query(TuitionBilling).count() == 1


def test_unique_violation_counts_as_skip(monkeypatch):
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        _enroll(db, math, "a@example.com")
        _enroll(db, math, "b@example.com")
        generate_monthly_billing(db, "2024-03", DUE)

        # Simulate a concurrent run that read the existing keys before they were written
        monkeypatch.setattr(billing_service, "_existing_billing_keys", lambda db, period: set())
        result = generate_monthly_billing(db, "2024-03", DUE)

        assert (result.created, result.skipped, result.failed) == (0, 2, ())
        assert db.query(TuitionBilling).count() == 2


def test_class_filter_and_enrollment_date():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        art = _create_class(db, "ART1", tuition_rate=900000)
        _enroll(db, math, "a@example.com")
        _enroll(db, art, "b@example.com")
        _enroll(db, math, "late@example.com", enrolled_at=date(2024, 4, 2))

        result = generate_monthly_billing(db, "2024-03", DUE, class_ids=[math.id])

        assert result.created == 1
        billing = db.query(TuitionBilling).one()
        assert billing.class_id == math.id


def test_generation_requires_valid_period_and_due_date():
    with SessionLocal() as db:
        with pytest.raises(PeriodValidationError):
            generate_monthly_billing(db, "2024-13", DUE)
        with pytest.raises(FinanceValidationError):
            generate_monthly_billing(db, "2024-03", None)


def test_tuition_change_does_not_touch_existing_invoices():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        _enroll(db, math, "a@example.com")
        generate_monthly_billing(db, "2024-03", DUE)

        math.tuition_rate = 2000000
        db.commit()
        generate_monthly_billing(db, "2024-04", date(2024, 4, 15))

        amounts = {b.billing_month: b.amount for b in db.query(TuitionBilling).all()}
        assert amounts == {"2024-03": 1500000, "2024-04": 2000000}


def test_status_transitions_set_and_clear_payment_stamp():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        _enroll(db, math, "a@example.com")
        generate_monthly_billing(db, "2024-03", DUE)
        billing = db.query(TuitionBilling).one()

        paid_at = datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)
        paid = update_billing_status(db, billing.id, "paid", payment_method="momo", now=paid_at)
        assert paid.status == "paid"
        assert paid.payment_method == "momo"
        assert paid.paid_at is not None

        reopened = update_billing_status(db, billing.id, "pending")
        assert reopened.paid_at is None
        assert reopened.payment_method is None


def test_status_update_rejects_unknown_values():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        _enroll(db, math, "a@example.com")
        generate_monthly_billing(db, "2024-03", DUE)
        billing = db.query(TuitionBilling).one()

        with pytest.raises(FinanceValidationError):
            update_billing_status(db, billing.id, "refunded")
        with pytest.raises(FinanceValidationError):
            update_billing_status(db, billing.id, "paid", payment_method="cheque")
        with pytest.raises(RecordNotFoundError):
            get_billing(db, 9999)


def test_mark_overdue_only_moves_pending_past_due():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        _enroll(db, math, "a@example.com")
        _enroll(db, math, "b@example.com")
        generate_monthly_billing(db, "2024-03", DUE)
        first, second = db.query(TuitionBilling).order_by(TuitionBilling.id).all()
        update_billing_status(db, second.id, "paid", payment_method="cash")

        assert mark_overdue_billings(db, DUE) == 0
        assert mark_overdue_billings(db, date(2024, 3, 16)) == 1
        assert [b.status for b in list_billings(db, status="overdue")] == ["overdue"]
        assert get_billing(db, first.id).status == "overdue"


def test_empty_class_filter_means_all_classes():
    with SessionLocal() as db:
        math = _create_class(db, "MATH1")
        art = _create_class(db, "ART1", tuition_rate=900000)
        _enroll(db, math, "a@example.com")
        _enroll(db, art, "b@example.com")

        result = generate_monthly_billing(db, "2024-03", DUE, class_ids=[])

        assert result.created == 2
