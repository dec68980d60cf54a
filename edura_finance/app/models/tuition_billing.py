"""Monthly tuition invoice per student per class."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class TuitionBilling(Base):
    __tablename__ = "tuition_billings"
    __table_args__ = (
        UniqueConstraint("student_id", "class_id", "billing_month", name="uq_tuition_billing_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    billing_month = Column(String(7), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    due_date = Column(Date, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    payment_method = Column(String(20), nullable=True)
    invoice_number = Column(String(32), nullable=True, unique=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    student = relationship("User", foreign_keys=[student_id])
    school_class = relationship("SchoolClass")

    @property
    def student_name(self) -> str | None:
        return self.student.full_name if self.student else None

    @property
    def student_email(self) -> str | None:
        return self.student.email if self.student else None

    @property
    def class_name(self) -> str | None:
        return self.school_class.class_name if self.school_class else None

    @property
    def class_code(self) -> str | None:
        return self.school_class.class_code if self.school_class else None

    @property
    def class_subject(self) -> str | None:
        return self.school_class.subject if self.school_class else None

    @property
    def teacher_name(self) -> str | None:
        if self.school_class is None or self.school_class.teacher is None:
            return None
        return self.school_class.teacher.full_name
