from hr_portal.auth.models import User
from hr_portal.core.models.employee import Employee
from hr_portal.core.models.leave_request import LeaveRequest
from hr_portal.core.models.absence_justification import AbsenceJustification
from hr_portal.core.models.complaint import Complaint
from hr_portal.core.models.career_path import CareerPath

__all__ = [
    "User",
    "Employee",
    "LeaveRequest",
    "AbsenceJustification",
    "Complaint",
    "CareerPath",
]
