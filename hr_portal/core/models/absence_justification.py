from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from hr_portal.core.datetime_utils import utcnow
from hr_portal.db.session import Base


class AbsenceJustification(Base):
    """absence_date + duration are the source of truth; start/end dates are derived for display."""

    __tablename__ = "absence_justifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    absence_date = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False, default=1)
    type = Column(String(100), nullable=True)  # sickness, family event, ...
    reason = Column(Text, nullable=False)
    document_path = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    rejection_reason = Column(Text, nullable=True)
    processed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    employee = relationship("Employee", back_populates="absence_justifications")
    processor = relationship("User", foreign_keys=[processed_by])
