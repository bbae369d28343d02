"""Authentication routes.

This module handles HTTP endpoints for registration, login, the current
user's profile and password resets. It also provides the bearer token
dependencies used by every other router.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from core.dependencies import AuthManagerDep, UserManagerDep
from core.exceptions import AuthError, ValidationError
from core.security import decode_access_token
from models.user import UserModel
from schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    RoleType,
    UpdateProfileRequest,
)
from utils.photo_storage import save_profile_photo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Missing credentials are reported as 401 by get_current_user
security = HTTPBearer(auto_error=False)


def get_current_user(
    user_manager: UserManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserModel:
    """Get current authenticated user.

    Args:
        user_manager: Injected UserManager instance.
        credentials: HTTP Bearer token credentials, if any.

    Returns:
        The authenticated UserModel.

    Raises:
        HTTPException: If no token was sent.
        AuthError: If the token is invalid or its user no longer exists.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise AuthError("Invalid authentication credentials") from e
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise AuthError("User not found")
    return user


def require_roles(*roles: RoleType):
    """Build a dependency admitting users holding any of the given roles."""
    allowed = {role.value for role in roles}

    def checker(current_user: UserModel = Depends(get_current_user)) -> UserModel:
        if not allowed.intersection(current_user.role_names):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action.",
            )
        return current_user

    return checker


# Shared gates: any signed-in user, staff (Instructor or Admin), Admin only
require_any_role = require_roles(RoleType.STUDENT, RoleType.INSTRUCTOR, RoleType.ADMIN)
require_staff = require_roles(RoleType.INSTRUCTOR, RoleType.ADMIN)
require_admin = require_roles(RoleType.ADMIN)


def _first_error(exc: PydanticValidationError) -> ValidationError:
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return ValidationError(message, inner=str(exc))


@router.post("/register", response_model=AuthResponse, summary="Register")
def register(req: RegisterRequest, auth_manager: AuthManagerDep) -> AuthResponse:
    """Register a new user and sign them in.

    Instructors must pass department_id; an instructor record is created
    alongside the account.
    """
    return auth_manager.register(req)


@router.post(
    "/register-with-photo",
    response_model=AuthResponse,
    summary="Register with a profile photo",
)
def register_with_photo(
    auth_manager: AuthManagerDep,
    first_name: str = Form(...),
    last_name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: RoleType = Form(...),
    phone_number: Optional[str] = Form(None),
    department_id: Optional[int] = Form(None),
    bio: Optional[str] = Form(None),
    date_of_birth: Optional[date] = Form(None),
    address: Optional[str] = Form(None),
    company: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
) -> AuthResponse:
    """Register from a multipart form.

    A photo that cannot be stored is skipped; registration still succeeds.
    """
    try:
        req = RegisterRequest(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            role=role,
            phone_number=phone_number,
            department_id=department_id,
            bio=bio,
            date_of_birth=date_of_birth,
            address=address,
            company=company,
        )
    except PydanticValidationError as e:
        raise _first_error(e) from e

    # Registration rules are checked before the photo touches the disk
    auth_manager.check_can_register(req)
    photo_url = save_profile_photo(photo)
    return auth_manager.register(req, profile_photo_url=photo_url)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(req: LoginRequest, auth_manager: AuthManagerDep) -> AuthResponse:
    """Login with email and password.

    Raises:
        AuthError: "Invalid credentials" for an unknown email or bad password.
    """
    return auth_manager.login(req.email, req.password)


@router.post("/logout", response_model=MessageResponse, summary="Logout")
def logout(current_user: UserModel = Depends(get_current_user)) -> MessageResponse:
    """Logout endpoint.

    Note: Since we're using stateless JWT tokens, logout is handled
    client-side by removing the token. This endpoint exists for API
    consistency.
    """
    logger.info("User %s logged out", current_user.id)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    auth_manager: AuthManagerDep,
    current_user: UserModel = Depends(get_current_user),
) -> CurrentUserResponse:
    return auth_manager.current_user(current_user)


@router.put("/profile", response_model=CurrentUserResponse, summary="Update profile")
def update_profile(
    auth_manager: AuthManagerDep,
    current_user: UserModel = Depends(get_current_user),
    first_name: Optional[str] = Form(None),
    last_name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None),
    bio: Optional[str] = Form(None),
    date_of_birth: Optional[date] = Form(None),
    address: Optional[str] = Form(None),
    company: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
) -> CurrentUserResponse:
    """Update the current user's profile from a multipart form.

    Omitted fields are left unchanged.

    Raises:
        ConflictError: If the new email belongs to another user.
    """
    submitted = {
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "phone_number": phone_number,
        "bio": bio,
        "date_of_birth": date_of_birth,
        "address": address,
        "company": company,
    }
    try:
        req = UpdateProfileRequest(
            **{key: value for key, value in submitted.items() if value is not None}
        )
    except PydanticValidationError as e:
        raise _first_error(e) from e

    # Email conflicts are rejected before the photo touches the disk
    auth_manager.check_profile_update(current_user, req)
    photo_url = save_profile_photo(photo)
    return auth_manager.update_profile(current_user, req, profile_photo_url=photo_url)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    summary="Request a password reset token",
)
def forgot_password(
    req: ForgotPasswordRequest, user_manager: UserManagerDep
) -> ForgotPasswordResponse:
    """Issue a single-use reset token.

    No email is sent; the token is returned in the response.

    Raises:
        NotFoundError: If no account uses the email.
    """
    token = user_manager.forgot_password(req.email)
    return ForgotPasswordResponse(token=token, email=req.email)


@router.post(
    "/reset-password", response_model=MessageResponse, summary="Reset password"
)
def reset_password(
    req: ResetPasswordRequest, user_manager: UserManagerDep
) -> MessageResponse:
    """Set a new password using a reset token.

    Raises:
        NotFoundError: If no account uses the email.
        ValidationError: If the token is invalid or expired.
    """
    user_manager.reset_password(req.email, req.token, req.new_password)
    return MessageResponse(message="Password has been reset successfully.")
