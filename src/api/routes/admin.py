"""Admin user directory routes."""

from typing import List

from fastapi import APIRouter, Depends, status

from api.routes.auth import require_admin, require_any_role
from core.dependencies import UserManagerDep
from core.exceptions import ValidationError
from schemas.user import ROLE_IDS, AdminUserInfo, RoleType

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "",
    response_model=List[AdminUserInfo],
    summary="List admins",
    dependencies=[Depends(require_any_role)],
)
def list_admins(user_manager: UserManagerDep) -> List[AdminUserInfo]:
    return [
        AdminUserInfo.model_validate(user)
        for user in user_manager.list_users_by_role_type(RoleType.ADMIN)
    ]


@router.get(
    "/role/{role_id}",
    response_model=List[AdminUserInfo],
    summary="List users by role id",
    dependencies=[Depends(require_any_role)],
)
def list_by_role(role_id: int, user_manager: UserManagerDep) -> List[AdminUserInfo]:
    """List users whose role tag matches a numeric role id.

    Role ids: 1 Student, 2 Instructor, 3 Admin.

    Raises:
        ValidationError: For any other role id.
    """
    if role_id not in ROLE_IDS:
        raise ValidationError(
            f"Invalid role id {role_id}. Use 1 (Student), 2 (Instructor) or 3 (Admin)."
        )
    users = user_manager.list_users_by_role_type(RoleType.from_id(role_id))
    return [AdminUserInfo.model_validate(user) for user in users]


@router.get(
    "/{user_id}",
    response_model=AdminUserInfo,
    summary="Get user",
    dependencies=[Depends(require_any_role)],
)
def get_user(user_id: int, user_manager: UserManagerDep) -> AdminUserInfo:
    return AdminUserInfo.model_validate(user_manager.require_user(user_id))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
    dependencies=[Depends(require_admin)],
)
def delete_user(user_id: int, user_manager: UserManagerDep) -> None:
    user_manager.delete_user(user_manager.require_user(user_id))
