"""Authentication and registration flow.

This module ties the user directory to token issuance and, for instructors,
to the instructor directory so both records are created together.
"""

import logging
from datetime import datetime
from typing import Optional

import pytz
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, ValidationError
from core.security import create_access_token
from models.user import UserModel
from schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    RegisterRequest,
    RoleType,
    UpdateProfileRequest,
    UserInfo,
)
from utils.department_manager import DepartmentManager
from utils.instructor_manager import InstructorManager
from utils.user_manager import DUPLICATE_EMAIL_MESSAGE, UserManager, normalize_email

logger = logging.getLogger(__name__)


class AuthManager:
    """Registers users, verifies credentials and issues bearer tokens."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)
        self.instructors = InstructorManager(db)
        self.departments = DepartmentManager(db)

    def issue_token(self, user: UserModel) -> AuthResponse:
        """Issue a bearer token and the user envelope for a user."""
        token, expiration = create_access_token(
            data={"sub": str(user.id), "email": user.email, "role": user.role_type}
        )
        return AuthResponse(
            token=token,
            expiration=expiration,
            user=UserInfo.model_validate(user),
        )

    def check_can_register(self, req: RegisterRequest) -> None:
        """Check registration rules that need no write."""
        if self.users.get_user_by_email(req.email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        if req.role == RoleType.INSTRUCTOR:
            if req.department_id is None:
                raise ValidationError("Department is required for instructors.")
            self.departments.get_department(req.department_id)

    def register(
        self, req: RegisterRequest, profile_photo_url: Optional[str] = None
    ) -> AuthResponse:
        """Register a new user.

        Instructors must name an existing department; their instructor record
        is created with the same email and password.

        Args:
            req: Registration request.
            profile_photo_url: URL of an uploaded photo, overrides the URL in
                the request.

        Returns:
            AuthResponse with a token for the new user.

        Raises:
            ConflictError: If the email is already registered.
            ValidationError: If an instructor registers without a department.
            NotFoundError: If the instructor's department does not exist.
        """
        self.check_can_register(req)

        now = datetime.now(pytz.utc)
        user = self.users.create_user(
            email=req.email,
            password=req.password,
            role=req.role,
            first_name=req.first_name,
            last_name=req.last_name,
            phone_number=req.phone_number,
            enrollment_date=now,
            bio=req.bio,
            profile_photo_url=profile_photo_url or req.profile_photo_url,
            date_of_birth=req.date_of_birth,
            address=req.address,
            company=req.company,
        )

        if req.role == RoleType.INSTRUCTOR:
            self.instructors.create_instructor(
                first_name=req.first_name,
                last_name=req.last_name,
                email=req.email,
                hire_date=now,
                department_id=req.department_id,
                phone_number=req.phone_number,
                password=req.password,
            )
            self.db.refresh(user)

        logger.info("Registered user %s as %s", user.id, req.role.value)
        return self.issue_token(user)

    def login(self, email: str, password: str) -> AuthResponse:
        """Verify credentials and issue a token.

        Raises:
            AuthError: "Invalid credentials" on unknown email or wrong password.
        """
        user = self.users.authenticate(email, password)
        logger.info("User %s logged in", user.id)
        return self.issue_token(user)

    def current_user(self, user: UserModel) -> CurrentUserResponse:
        info = UserInfo.model_validate(user)
        return CurrentUserResponse(
            **info.model_dump(),
            name=f"{user.first_name} {user.last_name}".strip(),
            enrollment_date=user.enrollment_date,
            roles=sorted(RoleType(name) for name in user.role_names),
        )

    def check_profile_update(self, user: UserModel, req: UpdateProfileRequest) -> None:
        """Check a profile update for an email conflict without writing.

        Raises:
            ConflictError: If the new email belongs to another user.
        """
        if req.email and normalize_email(req.email) != user.normalized_email:
            other = self.users.get_user_by_email(req.email)
            if other is not None and other.id != user.id:
                raise ConflictError("Email is already in use")

    def update_profile(
        self,
        user: UserModel,
        req: UpdateProfileRequest,
        profile_photo_url: Optional[str] = None,
    ) -> CurrentUserResponse:
        """Apply a partial profile update.

        A changed email is carried over to the user's instructor record so
        the two stay linked.

        Raises:
            ConflictError: If the new email belongs to another user.
        """
        self.check_profile_update(user, req)
        fields = req.model_dump(exclude_unset=True)
        if profile_photo_url:
            fields["profile_photo_url"] = profile_photo_url
        # Blank names are ignored rather than wiping the stored ones
        for name_field in ("first_name", "last_name", "email"):
            if fields.get(name_field) is not None and not str(fields[name_field]).strip():
                fields.pop(name_field)

        old_email = user.email
        user = self.users.update_account(user, **fields)
        if normalize_email(old_email) != user.normalized_email:
            self.instructors.relink_email(old_email, user.email)
        return self.current_user(user)
