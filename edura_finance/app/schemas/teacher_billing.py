"""Teacher-facing billing schemas."""

from typing import List, Optional

from pydantic import BaseModel


class ClassBillingStats(BaseModel):
    class_id: int
    class_name: str
    tuition_rate: Optional[int] = None
    paid_amount: int
    paid_count: int
    pending_amount: int
    pending_count: int


class TeacherBillingOverview(BaseModel):
    total_revenue: int
    paid_revenue: int
    pending_revenue: int
    class_billings: List[ClassBillingStats]


class StudentPaymentStatus(BaseModel):
    student_id: int
    student_name: Optional[str] = None
    student_email: str
    class_id: int
    class_name: str
    pending_bills: int
    paid_bills: int
    total_due: int
