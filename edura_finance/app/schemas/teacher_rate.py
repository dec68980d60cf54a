"""Teacher rate schemas."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

RateType = Literal["HOURLY", "PER_STUDENT", "MONTHLY_FIXED"]


class TeacherRateCreate(BaseModel):
    teacher_id: int
    rate_type: RateType
    amount: int
    effective_date: Optional[date] = None


class TeacherRateUpdate(BaseModel):
    amount: Optional[int] = None
    effective_date: Optional[date] = None


class TeacherRateRead(BaseModel):
    id: int
    teacher_id: int
    rate_type: str
    amount: int
    effective_date: date
    is_active: bool
    created_at: datetime
    teacher_name: Optional[str] = None
    teacher_email: Optional[str] = None
    usage_count: int = 0

    model_config = ConfigDict(from_attributes=True)
