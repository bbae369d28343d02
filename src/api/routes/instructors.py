"""Instructor routes.

Instructor writes also maintain the linked user account and the department
headship; see InstructorManager.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from api.routes.auth import require_admin, require_any_role, require_staff
from core.dependencies import CourseManagerDep, InstructorManagerDep
from schemas.course import AssignCourseRequest, CourseAssignmentInfo, CourseInfo
from schemas.instructor import InstructorCreateRequest, InstructorInfo

router = APIRouter(prefix="/api/instructors", tags=["Instructor"])


@router.get(
    "",
    response_model=List[InstructorInfo],
    summary="List instructors",
    dependencies=[Depends(require_any_role)],
)
def list_instructors(instructor_manager: InstructorManagerDep) -> List[InstructorInfo]:
    return instructor_manager.list_instructor_infos()


# Declared before /{instructor_id} routes so the literal path wins
@router.post(
    "/courses/assign",
    response_model=CourseAssignmentInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a course to an instructor",
    dependencies=[Depends(require_staff)],
)
def assign_course(
    req: AssignCourseRequest, course_manager: CourseManagerDep
) -> CourseAssignmentInfo:
    """Assign an instructor to teach a course.

    Raises:
        NotFoundError: If the instructor or course does not exist.
        ConflictError: If the instructor already teaches the course.
    """
    model = course_manager.assign_instructor(req.course_id, req.instructor_id)
    return CourseAssignmentInfo.model_validate(model)


@router.get(
    "/{instructor_id}",
    response_model=InstructorInfo,
    summary="Get instructor",
    dependencies=[Depends(require_any_role)],
)
def get_instructor(
    instructor_id: int, instructor_manager: InstructorManagerDep
) -> InstructorInfo:
    return instructor_manager.to_info(instructor_manager.get_instructor(instructor_id))


@router.get(
    "/{instructor_id}/available-courses",
    response_model=List[CourseInfo],
    summary="Courses an instructor can still be assigned to",
    dependencies=[Depends(require_any_role)],
)
def available_courses(
    instructor_id: int, instructor_manager: InstructorManagerDep
) -> List[CourseInfo]:
    instructor = instructor_manager.get_instructor(instructor_id)
    return [
        CourseInfo.model_validate(model)
        for model in instructor_manager.courses.available_courses_for(instructor)
    ]


@router.post(
    "",
    response_model=InstructorInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create instructor",
    dependencies=[Depends(require_staff)],
)
def create_instructor(
    req: InstructorCreateRequest, instructor_manager: InstructorManagerDep
) -> InstructorInfo:
    """Create an instructor and its user account.

    The instructor becomes head of its department when the department has
    none.
    """
    model = instructor_manager.create_instructor(
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        hire_date=req.hire_date,
        department_id=req.department_id,
        phone_number=req.phone_number,
        password=req.password,
    )
    return instructor_manager.to_info(model)


@router.put(
    "/{instructor_id}",
    response_model=InstructorInfo,
    summary="Update instructor",
    dependencies=[Depends(require_staff)],
)
def update_instructor(
    instructor_id: int,
    req: InstructorCreateRequest,
    instructor_manager: InstructorManagerDep,
) -> InstructorInfo:
    model = instructor_manager.update_instructor(
        instructor_id,
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        hire_date=req.hire_date,
        department_id=req.department_id,
        phone_number=req.phone_number,
        password=req.password,
    )
    return instructor_manager.to_info(model)


@router.delete(
    "/{instructor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete instructor",
    dependencies=[Depends(require_admin)],
)
def delete_instructor(
    instructor_id: int, instructor_manager: InstructorManagerDep
) -> None:
    instructor_manager.delete_instructor(instructor_id)
