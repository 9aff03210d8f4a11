from datetime import date

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hr_portal.core.datetime_utils import utcnow
from hr_portal.db.session import Base


class Employee(Base):
    """Employee profile; owns every request and the career path (cascade delete)."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    position = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False)
    employee_code = Column(String(50), nullable=False, unique=True)  # e.g. EMP-1A2B3C4D; identification only
    hire_date = Column(Date, nullable=False, default=date.today)
    # Days; decremented on leave approval
    leave_balance = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="active")
    grade = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="employee")
    leave_requests = relationship(
        "LeaveRequest", back_populates="employee", cascade="all, delete-orphan"
    )
    absence_justifications = relationship(
        "AbsenceJustification", back_populates="employee", cascade="all, delete-orphan"
    )
    complaints = relationship(
        "Complaint", back_populates="employee", cascade="all, delete-orphan"
    )
    career_path = relationship(
        "CareerPath", back_populates="employee", uselist=False, cascade="all, delete-orphan"
    )
