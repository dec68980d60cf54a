"""Conducted class sessions as logged by the attendance collaborator."""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class SessionRecord(Base):
    __tablename__ = "session_records"

    id = Column(Integer, primary_key=True, index=True)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    session_date = Column(Date, nullable=False, index=True)
    check_in_time = Column(DateTime, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    actual_duration_minutes = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="checked_in")
    # Students present when the session was closed out.
    student_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    @property
    def is_valid(self) -> bool:
        return self.status == "completed"
