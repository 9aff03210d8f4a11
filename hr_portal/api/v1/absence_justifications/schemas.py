from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from hr_portal.core.schemas import NonBlankLabel, NonBlankNote


class AbsenceJustificationCreate(BaseModel):
    absence_date: date
    duration: int = Field(..., ge=1, description="Days, counting absence_date itself")
    type: NonBlankLabel
    reason: NonBlankNote


class AbsenceJustificationUpdate(BaseModel):
    absence_date: Optional[date] = None
    duration: Optional[int] = Field(None, ge=1)
    type: Optional[NonBlankLabel] = None
    reason: Optional[NonBlankNote] = None


class AbsenceJustificationStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]
    rejection_reason: Optional[str] = Field(None, max_length=5000, description="Required when rejecting")


class AbsenceJustificationResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: Optional[str] = None
    type: Optional[str] = None
    absence_date: date
    start_date: date
    end_date: date
    duration: int
    reason: str
    status: str
    rejection_reason: Optional[str] = None
    document_url: Optional[str] = None
    processed_by: Optional[int] = None
    processor_name: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
