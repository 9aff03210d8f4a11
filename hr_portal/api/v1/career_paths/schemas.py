from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class CareerPathCreate(BaseModel):
    employee_id: int
    current_position: str = Field(..., min_length=1, max_length=255)
    target_position: Optional[str] = Field(None, max_length=255)
    last_promotion: Optional[date] = None
    next_review: Optional[date] = None
    skills_to_develop: Optional[str] = None
    achievements: Optional[str] = None


class CareerPathUpdate(BaseModel):
    """employee_id is not editable; a career path stays with its employee."""

    current_position: Optional[str] = Field(None, min_length=1, max_length=255)
    target_position: Optional[str] = Field(None, max_length=255)
    last_promotion: Optional[date] = None
    next_review: Optional[date] = None
    skills_to_develop: Optional[str] = None
    achievements: Optional[str] = None


class CareerPathResponse(BaseModel):
    id: int
    employee_id: int
    employee_name: Optional[str] = None
    current_position: str
    target_position: Optional[str] = None
    last_promotion: Optional[date] = None
    next_review: Optional[date] = None
    skills_to_develop: Optional[str] = None
    achievements: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CareerSummary(BaseModel):
    """What an employee sees on their own career page."""

    current_position: str
    current_grade: Optional[str] = None
    hire_date: date
    target_position: Optional[str] = None
    next_review: Optional[date] = None
    skills_to_develop: Optional[str] = None
    achievements: Optional[str] = None
    has_career_path: bool
