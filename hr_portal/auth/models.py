from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from hr_portal.core.datetime_utils import utcnow
from hr_portal.db.session import Base


class User(Base):
    """Login account. Role decides what the user may review; the employee profile decides what they own."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    # admin | rh | employee
    role = Column(String(20), nullable=False, default="employee")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    employee = relationship(
        "Employee", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
