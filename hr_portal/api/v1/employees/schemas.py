from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from hr_portal.core.enums import EmployeeStatus, Role


class EmployeeCreate(BaseModel):
    """Only email and password are required; the rest falls back to defaults."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Role = Role.EMPLOYEE
    position: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    employee_code: Optional[str] = Field(None, min_length=1, max_length=50)
    hire_date: Optional[date] = None
    leave_balance: Optional[int] = Field(None, ge=0)
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    grade: Optional[str] = Field(None, max_length=255)


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = Field(None, min_length=1, max_length=255)
    employee_code: Optional[str] = Field(None, min_length=1, max_length=50)
    hire_date: Optional[date] = None
    leave_balance: Optional[int] = Field(None, ge=0)
    status: Optional[EmployeeStatus] = None
    grade: Optional[str] = Field(None, max_length=255)


class EmployeeResponse(BaseModel):
    id: int
    user_id: int
    name: str
    email: EmailStr
    role: Role
    position: str
    department: str
    employee_code: str
    hire_date: date
    leave_balance: int
    status: EmployeeStatus
    grade: Optional[str] = None
    created_at: datetime
    updated_at: datetime
