from sqlalchemy import Column, Date, Float, Integer, String

from .base import Base


class DepartmentModel(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    budget = Column(Float, nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    # Head instructor; plain column, instructors already point back here
    head_instructor_id = Column(Integer, index=True, nullable=True)
