"""Effective-dated compensation rates for teachers."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class TeacherRate(Base):
    __tablename__ = "teacher_rates"
    __table_args__ = (Index("ix_teacher_rates_lookup", "teacher_id", "rate_type", "effective_date"),)

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rate_type = Column(String(20), nullable=False)
    amount = Column(Integer, nullable=False)
    effective_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    teacher = relationship("User", foreign_keys=[teacher_id])
    payments = relationship("TutorPayment", back_populates="rate")

    @property
    def teacher_name(self) -> str | None:
        return self.teacher.full_name if self.teacher else None

    @property
    def teacher_email(self) -> str | None:
        return self.teacher.email if self.teacher else None
