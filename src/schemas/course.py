"""Course schema definitions."""

from pydantic import BaseModel, ConfigDict, Field


class CourseCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    credits: int = Field(default=0, ge=0, le=10)
    department_id: int


class CourseInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    credits: int
    department_id: int


class AssignCourseRequest(BaseModel):
    instructor_id: int
    course_id: int


class CourseAssignmentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    instructor_id: int
    course_id: int
