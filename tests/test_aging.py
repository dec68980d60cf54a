from datetime import date

import pytest

from edura_finance.app.db.base import Base
from edura_finance.app.db.session import SessionLocal, engine
from edura_finance.app.models.school_class import SchoolClass
from edura_finance.app.models.tuition_billing import TuitionBilling
from edura_finance.app.models.user import User
from edura_finance.app.services.aging import (
    AGING_BUCKETS,
    bucket_for_days,
    classify_overdue,
    get_aging_summary,
)

AS_OF = date(2024, 6, 30)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _seed_billings(db, rows):
    school_class = SchoolClass(class_name="Math", class_code="MATH1", tuition_rate=1000000)
    db.add(school_class)
    db.commit()
    for index, (due_date, status, amount) in enumerate(rows):
        student = User(email=f"s{index}@example.com", hashed_password="x", role="student")
        db.add(student)
        db.commit()
        db.add(
            TuitionBilling(
                student_id=student.id,
                class_id=school_class.id,
                billing_month=f"{due_date.year:04d}-{due_date.month:02d}",
                amount=amount,
                status=status,
                due_date=due_date,
            )
        )
    db.commit()


@pytest.mark.parametrize(
    "days, bucket",
    [(1, "1-30"), (30, "1-30"), (31, "31-60"), (60, "31-60"), (61, "61-90"), (90, "61-90"), (91, "90+"), (400, "90+")],
)
def test_bucket_boundaries(days, bucket):
    assert bucket_for_days(days) == bucket


def test_bucket_rejects_not_overdue():
    with pytest.raises(ValueError):
        bucket_for_days(0)


def test_classify_only_unpaid_past_due():
    with SessionLocal() as db:
        _seed_billings(
            db,
            [
                (date(2024, 6, 29), "pending", 100),
                (date(2024, 6, 30), "pending", 200),
                (date(2024, 5, 1), "overdue", 300),
                (date(2024, 5, 1), "paid", 400),
                (date(2024, 1, 15), "cancelled", 500),
            ],
        )

        aged = classify_overdue(db, AS_OF)

        assert [(a.billing.amount, a.days_overdue, a.bucket) for a in aged] == [(300, 60, "31-60"), (100, 1, "1-30")]


def test_summary_bucket_totals_add_up():
    with SessionLocal() as db:
        _seed_billings(
            db,
            [
                (date(2024, 6, 20), "pending", 100),
                (date(2024, 6, 1), "overdue", 200),
                (date(2024, 5, 15), "overdue", 400),
                (date(2024, 4, 10), "overdue", 800),
                (date(2024, 1, 15), "overdue", 1600),
                (date(2023, 12, 15), "pending", 3200),
            ],
        )

        summary = get_aging_summary(db, AS_OF)

        assert [b.bucket for b in summary.buckets] == list(AGING_BUCKETS)
        totals = {b.bucket: (b.total, b.count) for b in summary.buckets}
        assert totals == {"1-30": (300, 2), "31-60": (400, 1), "61-90": (800, 1), "90+": (4800, 2)}
        assert summary.total_overdue_amount == sum(b.total for b in summary.buckets) == 6300
        assert summary.total_overdue_count == sum(b.count for b in summary.buckets) == 6


def test_empty_summary_has_all_buckets():
    with SessionLocal() as db:
        summary = get_aging_summary(db, AS_OF)
        assert [(b.bucket, b.total, b.count) for b in summary.buckets] == [(b, 0, 0) for b in AGING_BUCKETS]
        assert summary.total_overdue_amount == 0
