"""Enrollment routes."""

from typing import List

from fastapi import APIRouter, Depends, status

from api.routes.auth import require_any_role, require_staff
from core.dependencies import EnrollmentManagerDep
from schemas.enrollment import EnrollmentCreateRequest, EnrollmentDetail, EnrollmentInfo

router = APIRouter(
    prefix="/api/enrollments",
    tags=["Enrollment"],
)


@router.get(
    "",
    response_model=List[EnrollmentDetail],
    summary="List enrollments",
    dependencies=[Depends(require_any_role)],
)
def list_enrollments(enrollment_manager: EnrollmentManagerDep) -> List[EnrollmentDetail]:
    return enrollment_manager.list_all()


@router.get(
    "/student/{student_id}",
    response_model=List[EnrollmentDetail],
    summary="Enrollments of a student",
    dependencies=[Depends(require_any_role)],
)
def list_by_student(
    student_id: int, enrollment_manager: EnrollmentManagerDep
) -> List[EnrollmentDetail]:
    return enrollment_manager.list_by_student(student_id)


@router.get(
    "/course/{course_id}",
    response_model=List[EnrollmentDetail],
    summary="Enrollments in a course",
    dependencies=[Depends(require_any_role)],
)
def list_by_course(
    course_id: int, enrollment_manager: EnrollmentManagerDep
) -> List[EnrollmentDetail]:
    return enrollment_manager.list_by_course(course_id)


@router.get(
    "/{enrollment_id}",
    response_model=EnrollmentDetail,
    summary="Get enrollment",
    dependencies=[Depends(require_any_role)],
)
def get_enrollment(
    enrollment_id: int, enrollment_manager: EnrollmentManagerDep
) -> EnrollmentDetail:
    return enrollment_manager.get_by_id(enrollment_id)


@router.post(
    "",
    response_model=EnrollmentInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll a student",
    dependencies=[Depends(require_staff)],
)
def create_enrollment(
    req: EnrollmentCreateRequest, enrollment_manager: EnrollmentManagerDep
) -> EnrollmentInfo:
    """Enroll a student in a course.

    Raises:
        ValidationError: If an id is not positive or the user is not a student.
        NotFoundError: If the course or user does not exist.
        ConflictError: If the student is already enrolled.
    """
    model = enrollment_manager.create(req.course_id, req.student_id, req.grade)
    return EnrollmentInfo.model_validate(model)


@router.put(
    "/{enrollment_id}",
    response_model=EnrollmentInfo,
    summary="Update enrollment",
    dependencies=[Depends(require_staff)],
)
def update_enrollment(
    enrollment_id: int,
    req: EnrollmentCreateRequest,
    enrollment_manager: EnrollmentManagerDep,
) -> EnrollmentInfo:
    model = enrollment_manager.update(
        enrollment_id, req.course_id, req.student_id, req.grade
    )
    return EnrollmentInfo.model_validate(model)


@router.delete(
    "/{enrollment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete enrollment",
    dependencies=[Depends(require_staff)],
)
def delete_enrollment(
    enrollment_id: int, enrollment_manager: EnrollmentManagerDep
) -> None:
    enrollment_manager.delete(enrollment_id)
