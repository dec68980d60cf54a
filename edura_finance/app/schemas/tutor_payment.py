"""Tutor payment schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class TutorPayCalculateRequest(BaseModel):
    payment_month: str


class TutorPaymentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    teacher_id: int
    payment_month: str
    amount: int
    sessions_count: int
    students_count: int
    rate_id: Optional[int]
    rate_type: str
    status: str
    paid_at: Optional[datetime]
    payment_method: Optional[str]
    notes: Optional[str]
    created_at: datetime
    teacher_name: Optional[str] = None
    teacher_email: Optional[str] = None
