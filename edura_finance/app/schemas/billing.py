"""Tuition billing schemas."""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

BillingStatus = Literal["pending", "paid", "overdue", "cancelled"]
PaymentMethod = Literal["cash", "bank_transfer", "momo", "vnpay"]


class FailedItemRead(BaseModel):
    id: int
    reason: str

    model_config = ConfigDict(from_attributes=True)


class BatchResultRead(BaseModel):
    created: int
    skipped: int
    failed: List[FailedItemRead] = []

    model_config = ConfigDict(from_attributes=True)


class BillingGenerateRequest(BaseModel):
    billing_month: str
    due_date: Optional[date] = None
    class_ids: Optional[List[int]] = None


class StatusUpdate(BaseModel):
    status: BillingStatus
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None


class MarkOverdueRequest(BaseModel):
    as_of: Optional[date] = None


class MarkOverdueResult(BaseModel):
    as_of: date
    updated: int


class TuitionBillingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    class_id: int
    billing_month: str
    amount: int
    status: str
    due_date: date
    paid_at: Optional[datetime]
    payment_method: Optional[str]
    invoice_number: Optional[str]
    notes: Optional[str]
    created_at: datetime
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    class_name: Optional[str] = None
    class_code: Optional[str] = None
    class_subject: Optional[str] = None
    teacher_name: Optional[str] = None
