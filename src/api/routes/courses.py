"""Course routes."""

from typing import List

from fastapi import APIRouter, Depends, status

from api.routes.auth import require_any_role, require_staff
from core.dependencies import CourseManagerDep
from schemas.course import CourseCreateRequest, CourseInfo

router = APIRouter(prefix="/api/courses", tags=["Course"])


@router.get(
    "",
    response_model=List[CourseInfo],
    summary="List courses",
    dependencies=[Depends(require_any_role)],
)
def list_courses(course_manager: CourseManagerDep) -> List[CourseInfo]:
    return [CourseInfo.model_validate(model) for model in course_manager.list_courses()]


@router.get(
    "/{course_id}",
    response_model=CourseInfo,
    summary="Get course",
    dependencies=[Depends(require_any_role)],
)
def get_course(course_id: int, course_manager: CourseManagerDep) -> CourseInfo:
    return CourseInfo.model_validate(course_manager.get_course(course_id))


@router.post(
    "",
    response_model=CourseInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    dependencies=[Depends(require_staff)],
)
def create_course(req: CourseCreateRequest, course_manager: CourseManagerDep) -> CourseInfo:
    """Create a course.

    Raises:
        NotFoundError: If the department does not exist.
    """
    model = course_manager.create_course(req.title, req.credits, req.department_id)
    return CourseInfo.model_validate(model)


@router.put(
    "/{course_id}",
    response_model=CourseInfo,
    summary="Update course",
    dependencies=[Depends(require_staff)],
)
def update_course(
    course_id: int, req: CourseCreateRequest, course_manager: CourseManagerDep
) -> CourseInfo:
    model = course_manager.update_course(
        course_id, req.title, req.credits, req.department_id
    )
    return CourseInfo.model_validate(model)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete course",
    dependencies=[Depends(require_staff)],
)
def delete_course(course_id: int, course_manager: CourseManagerDep) -> None:
    course_manager.delete_course(course_id)
