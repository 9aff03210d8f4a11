from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from hr_portal.core.schemas import NonBlankText, NonBlankTitle


class ComplaintCreate(BaseModel):
    subject: NonBlankTitle
    description: NonBlankText


class ComplaintUpdate(BaseModel):
    subject: Optional[NonBlankTitle] = None
    description: Optional[NonBlankText] = None


class ComplaintStatusUpdate(BaseModel):
    status: Literal["in_review", "resolved", "rejected"]
    resolution_details: Optional[str] = Field(
        None, description="Required when resolving or rejecting"
    )


class ComplaintResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: Optional[str] = None
    subject: str
    description: str
    attachment_url: Optional[str] = None
    status: str
    resolution_details: Optional[str] = None
    handled_by: Optional[int] = None
    handler_name: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
