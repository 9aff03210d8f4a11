from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class StaffStats(BaseModel):
    total_employees: int
    active_employees: int
    inactive_employees: int
    pending_leaves: int
    pending_complaints: int
    pending_absences: int


class RecentEmployee(BaseModel):
    id: int
    name: str
    email: str
    position: str
    grade: Optional[str] = None
    hire_date: date
    status: str


class StaffDashboard(BaseModel):
    stats: StaffStats
    recent_employees: List[RecentEmployee]


class EmployeeSummary(BaseModel):
    id: int
    name: str
    position: str
    department: str
    leave_balance: int
    status: str


class RecentLeaveRequest(BaseModel):
    id: int
    type: str
    start_date: date
    end_date: date
    duration: int
    status: str
    created_at: datetime


class EmployeeDashboard(BaseModel):
    employee: EmployeeSummary
    # entity -> status -> count; every status of the entity is present
    stats: Dict[str, Dict[str, int]]
    recent_leave_requests: List[RecentLeaveRequest]
