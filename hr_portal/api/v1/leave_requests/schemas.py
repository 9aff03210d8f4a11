from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from hr_portal.core.schemas import NonBlankLabel, NonBlankNote


class LeaveRequestCreate(BaseModel):
    """Owner and duration are set by the backend; any client-supplied values are ignored."""

    type: NonBlankLabel
    start_date: date
    end_date: date
    reason: NonBlankNote


class LeaveRequestUpdate(BaseModel):
    type: Optional[NonBlankLabel] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[NonBlankNote] = None


class LeaveRequestStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]
    rejection_reason: Optional[str] = Field(None, max_length=5000, description="Required when rejecting")


class LeaveRequestResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: Optional[str] = None
    type: str
    start_date: date
    end_date: date
    duration: int
    reason: str
    status: str
    rejection_reason: Optional[str] = None
    processed_by: Optional[int] = None
    processor_name: Optional[str] = None
    processed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
