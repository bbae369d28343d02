"""Instructor database model.

An instructor row is kept in lockstep with a User holding the Instructor
role; the two are linked by email.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from .base import Base


class InstructorModel(Base):
    """Instructor database model."""

    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(256), index=True, nullable=False)
    phone_number = Column(String(20), nullable=True)
    hire_date = Column(DateTime(timezone=True), nullable=False)
    department_id = Column(
        Integer,
        ForeignKey("departments.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
