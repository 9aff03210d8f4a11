from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    RH = "rh"
    EMPLOYEE = "employee"


# Roles allowed to review requests and manage employee data
STAFF_ROLES = (Role.ADMIN, Role.RH)


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RequestStatus(str, Enum):
    """Statuses shared by leave requests and absence justifications."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    IN_REVIEW = "in_review"
    RESOLVED = "resolved"
    REJECTED = "rejected"
