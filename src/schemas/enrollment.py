"""Enrollment schema definitions."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EnrollmentCreateRequest(BaseModel):
    course_id: int
    student_id: int
    grade: Optional[float] = Field(default=None, ge=0, le=100)


class EnrollmentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    student_id: int
    grade: Optional[float] = None


class EnrollmentDetail(BaseModel):
    """Enrollment joined with its course, department and student."""

    enrollment_id: int
    course_id: int
    student_id: int
    grade: Optional[float] = None
    course_name: Optional[str] = None
    credits: int = 0
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    student_name: Optional[str] = None
    student_email: Optional[str] = None
