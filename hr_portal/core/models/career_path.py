from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from hr_portal.core.datetime_utils import utcnow
from hr_portal.db.session import Base


class CareerPath(Base):
    """At most one per employee; uniqueness is checked by the service on create."""

    __tablename__ = "career_paths"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    current_position = Column(String(255), nullable=False)
    target_position = Column(String(255), nullable=True)
    last_promotion = Column(Date, nullable=True)
    next_review = Column(Date, nullable=True)
    skills_to_develop = Column(Text, nullable=True)
    achievements = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    employee = relationship("Employee", back_populates="career_path")
