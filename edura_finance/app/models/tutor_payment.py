"""Monthly payout record per teacher."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class TutorPayment(Base):
    __tablename__ = "tutor_payments"
    __table_args__ = (UniqueConstraint("teacher_id", "payment_month", name="uq_tutor_payment_period"),)

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    payment_month = Column(String(7), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    sessions_count = Column(Integer, nullable=False, default=0)
    students_count = Column(Integer, nullable=False, default=0)
    rate_id = Column(Integer, ForeignKey("teacher_rates.id"), nullable=True, index=True)
    rate_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    paid_at = Column(DateTime, nullable=True)
    payment_method = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    teacher = relationship("User", foreign_keys=[teacher_id])
    rate = relationship("TeacherRate", back_populates="payments")

    @property
    def teacher_name(self) -> str | None:
        return self.teacher.full_name if self.teacher else None

    @property
    def teacher_email(self) -> str | None:
        return self.teacher.email if self.teacher else None
