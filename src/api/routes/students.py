"""Student routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.routes.auth import require_any_role, require_staff
from core.dependencies import StudentManagerDep
from schemas.student import StudentCreateRequest, StudentInfo

router = APIRouter(prefix="/api/students", tags=["Student"])


@router.get(
    "",
    response_model=List[StudentInfo],
    summary="List students",
    dependencies=[Depends(require_any_role)],
)
def list_students(student_manager: StudentManagerDep) -> List[StudentInfo]:
    return [StudentInfo.model_validate(s) for s in student_manager.list_students()]


@router.get(
    "/search",
    response_model=List[StudentInfo],
    summary="Search students",
    dependencies=[Depends(require_any_role)],
)
def search_students(
    student_manager: StudentManagerDep,
    user_id: Optional[int] = Query(None, alias="userid"),
    instructor_id: Optional[int] = Query(None, alias="instructorId"),
    course_id: Optional[int] = Query(None, alias="courseId"),
) -> List[StudentInfo]:
    """Search by user id, instructor or course.

    The first given filter is applied; without filters every student is
    returned.
    """
    results = student_manager.search(
        user_id=user_id, instructor_id=instructor_id, course_id=course_id
    )
    return [StudentInfo.model_validate(s) for s in results]


@router.get(
    "/{student_id}",
    response_model=StudentInfo,
    summary="Get student",
    dependencies=[Depends(require_any_role)],
)
def get_student(student_id: int, student_manager: StudentManagerDep) -> StudentInfo:
    return StudentInfo.model_validate(student_manager.get_student(student_id))


@router.post(
    "",
    response_model=StudentInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
    dependencies=[Depends(require_staff)],
)
def create_student(
    req: StudentCreateRequest, student_manager: StudentManagerDep
) -> StudentInfo:
    """Create a student account.

    Raises:
        ValidationError: If no password is given.
        ConflictError: If the email is already registered.
    """
    model = student_manager.create_student(
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        enrollment_date=req.enrollment_date,
        password=req.password,
        phone_number=req.phone_number,
    )
    return StudentInfo.model_validate(model)


@router.put(
    "/{student_id}",
    response_model=StudentInfo,
    summary="Update student",
    dependencies=[Depends(require_staff)],
)
def update_student(
    student_id: int, req: StudentCreateRequest, student_manager: StudentManagerDep
) -> StudentInfo:
    model = student_manager.update_student(
        student_id,
        first_name=req.first_name,
        last_name=req.last_name,
        email=req.email,
        enrollment_date=req.enrollment_date,
        password=req.password,
        phone_number=req.phone_number,
    )
    return StudentInfo.model_validate(model)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete student",
    dependencies=[Depends(require_staff)],
)
def delete_student(student_id: int, student_manager: StudentManagerDep) -> None:
    student_manager.delete_student(student_id)
