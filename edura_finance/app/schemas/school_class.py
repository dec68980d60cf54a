from typing import Optional

from pydantic import BaseModel, ConfigDict


class TuitionRateUpdate(BaseModel):
    tuition_rate: int


class SchoolClassRead(BaseModel):
    id: int
    class_name: str
    class_code: str
    subject: Optional[str] = None
    teacher_id: Optional[int] = None
    tuition_rate: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
