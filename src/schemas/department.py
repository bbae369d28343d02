"""Department schema definitions."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DepartmentCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    budget: float = Field(default=0, ge=0)
    start_date: date
    head_instructor_id: Optional[int] = Field(
        default=None,
        description="Instructor administering the department; must exist when set.",
    )


class DepartmentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    budget: float
    start_date: date
    head_instructor_id: Optional[int] = None


class DepartmentListItem(DepartmentInfo):
    """Department row with its head's name and relation counts."""

    administrator_name: Optional[str] = None
    course_count: int = 0
    student_count: int = Field(
        default=0,
        description="Distinct students enrolled in any course of the department.",
    )
