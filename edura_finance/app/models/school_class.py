"""Class model; only the fields the finance engine reads."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)
    class_name = Column(String, nullable=False)
    class_code = Column(String(32), nullable=False, unique=True)
    subject = Column(String, nullable=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    # Monthly tuition in minor currency units; NULL means not configured yet.
    tuition_rate = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    teacher = relationship("User", foreign_keys=[teacher_id])
    enrollments = relationship("Enrollment", back_populates="school_class", cascade="all, delete-orphan")
