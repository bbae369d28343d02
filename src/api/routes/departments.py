"""Department routes."""

from typing import List

from fastapi import APIRouter, Depends, status

from api.routes.auth import require_any_role, require_staff
from core.dependencies import DepartmentManagerDep
from schemas.department import DepartmentCreateRequest, DepartmentInfo, DepartmentListItem

router = APIRouter(prefix="/api/departments", tags=["Department"])


@router.get("", response_model=List[DepartmentListItem], summary="List departments")
def list_departments(
    department_manager: DepartmentManagerDep,
) -> List[DepartmentListItem]:
    """List departments with their head's name and course and student counts.

    This listing is public so registration forms can offer departments.
    """
    return department_manager.list_with_relations()


@router.get(
    "/{department_id}",
    response_model=DepartmentInfo,
    summary="Get department",
    dependencies=[Depends(require_any_role)],
)
def get_department(
    department_id: int, department_manager: DepartmentManagerDep
) -> DepartmentInfo:
    return DepartmentInfo.model_validate(
        department_manager.get_department(department_id)
    )


@router.post(
    "",
    response_model=DepartmentInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create department",
    dependencies=[Depends(require_staff)],
)
def create_department(
    req: DepartmentCreateRequest, department_manager: DepartmentManagerDep
) -> DepartmentInfo:
    model = department_manager.create_department(
        name=req.name,
        budget=req.budget,
        start_date=req.start_date,
        head_instructor_id=req.head_instructor_id,
    )
    return DepartmentInfo.model_validate(model)


@router.put(
    "/{department_id}",
    response_model=DepartmentInfo,
    summary="Update department",
    dependencies=[Depends(require_staff)],
)
def update_department(
    department_id: int,
    req: DepartmentCreateRequest,
    department_manager: DepartmentManagerDep,
) -> DepartmentInfo:
    model = department_manager.update_department(
        department_id,
        name=req.name,
        budget=req.budget,
        start_date=req.start_date,
        head_instructor_id=req.head_instructor_id,
    )
    return DepartmentInfo.model_validate(model)


@router.delete(
    "/{department_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete department",
    dependencies=[Depends(require_staff)],
)
def delete_department(
    department_id: int, department_manager: DepartmentManagerDep
) -> None:
    """Delete a department, its courses and their enrollments.

    Instructors of the department are kept without a department.
    """
    department_manager.delete_department(department_id)
