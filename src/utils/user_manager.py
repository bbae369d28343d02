"""User management utilities.

This module provides user management functionality including user storage,
password hashing, role memberships, password reset tokens, and user
authentication.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

import bcrypt
import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import MIN_PASSWORD_LENGTH, PASSWORD_RESET_TOKEN_EXPIRE_HOURS
from core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from models.enrollment import EnrollmentModel
from models.password_reset_token import PasswordResetTokenModel
from models.user import UserModel, UserRoleModel
from schemas.user import RoleType

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12

DUPLICATE_EMAIL_MESSAGE = (
    "An account with this email already exists. Sign in or use a different email."
)


def normalize_email(email: str) -> str:
    """Return the case-insensitive lookup key for an email address."""
    return email.strip().lower()


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        # bcrypt only looks at the first 72 bytes
        password_bytes = password.encode("utf-8")[:72]
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        password_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def check_password_policy(self, password: Optional[str]) -> None:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )

    # --- Lookup ---

    def get_user_by_id(self, user_id: int) -> Optional[UserModel]:
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        """Get a user by email, ignoring case.

        Args:
            email: Email to look up.

        Returns:
            UserModel if found, None otherwise.
        """
        if not email:
            return None
        return (
            self.db.query(UserModel)
            .filter(UserModel.normalized_email == normalize_email(email))
            .first()
        )

    def require_user(self, user_id: int) -> UserModel:
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError.for_entity("User", user_id)
        return user

    def list_users_by_role_type(self, role: RoleType) -> List[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.role_type == role.value)
            .order_by(UserModel.id)
            .all()
        )

    def list_users_in_role(self, role: RoleType) -> List[UserModel]:
        """List users holding a role membership."""
        return (
            self.db.query(UserModel)
            .join(UserRoleModel, UserRoleModel.user_id == UserModel.id)
            .filter(UserRoleModel.role == role.value)
            .order_by(UserModel.id)
            .all()
        )

    def count_users_in_role(self, role: RoleType) -> int:
        return (
            self.db.query(UserRoleModel)
            .filter(UserRoleModel.role == role.value)
            .count()
        )

    # --- Roles ---

    def has_role(self, user: UserModel, role: RoleType) -> bool:
        return role.value in user.role_names

    def add_role(self, user: UserModel, role: RoleType) -> None:
        """Add a role membership to a user if it is missing.

        Args:
            user: User to update.
            role: Role to add.
        """
        if self.has_role(user, role):
            return
        user.roles.append(UserRoleModel(role=role.value))
        self.db.commit()
        logger.info("Added role %s to user %s", role.value, user.id)

    # --- Mutations ---

    def create_user(
        self,
        email: str,
        password: str,
        role: RoleType,
        first_name: str,
        last_name: str,
        phone_number: Optional[str] = None,
        enrollment_date: Optional[datetime] = None,
        bio: Optional[str] = None,
        profile_photo_url: Optional[str] = None,
        date_of_birth=None,
        address: Optional[str] = None,
        company: Optional[str] = None,
    ) -> UserModel:
        """Create a new user holding the given role.

        Args:
            email: Email address, unique regardless of case.
            password: Plain text password.
            role: Role tag of the new user.
            first_name: First (and middle) name.
            last_name: Last name.
            phone_number: Optional phone number.
            enrollment_date: Defaults to now.
            bio: Optional profile bio.
            profile_photo_url: Optional profile photo URL.
            date_of_birth: Optional date of birth.
            address: Optional address.
            company: Optional company.

        Returns:
            Created UserModel.

        Raises:
            ConflictError: If the email is already registered.
            ValidationError: If the password is too short.
        """
        if self.get_user_by_email(email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        self.check_password_policy(password)

        user = UserModel(
            email=email,
            normalized_email=normalize_email(email),
            password_hash=self.hash_password(password),
            role_type=role.value,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            enrollment_date=enrollment_date or datetime.now(pytz.utc),
            bio=bio,
            profile_photo_url=profile_photo_url,
            date_of_birth=date_of_birth,
            address=address,
            company=company,
        )
        user.roles.append(UserRoleModel(role=role.value))

        # Two concurrent registrations can both pass the check above; the
        # unique index on normalized_email decides.
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e

        logger.info("Created user %s with role %s", user.id, role.value)
        return user

    def update_account(
        self,
        user: UserModel,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
        enrollment_date: Optional[datetime] = None,
        **profile_fields,
    ) -> UserModel:
        """Update account fields; None leaves a field unchanged.

        Args:
            user: User to update.
            first_name: New first name.
            last_name: New last name.
            email: New email; must not belong to another user.
            phone_number: New phone number.
            enrollment_date: New enrollment date.
            **profile_fields: bio, profile_photo_url, date_of_birth, address,
                company.

        Returns:
            The updated user.

        Raises:
            ConflictError: If the new email is used by another user.
        """
        if email and normalize_email(email) != user.normalized_email:
            other = self.get_user_by_email(email)
            if other is not None and other.id != user.id:
                raise ConflictError("Email is already in use")
            user.email = email
            user.normalized_email = normalize_email(email)

        if first_name:
            user.first_name = first_name
        if last_name:
            user.last_name = last_name
        if phone_number is not None:
            user.phone_number = phone_number
        if enrollment_date is not None:
            user.enrollment_date = enrollment_date
        for field in ("bio", "profile_photo_url", "date_of_birth", "address", "company"):
            value = profile_fields.get(field)
            if value is not None:
                setattr(user, field, value)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Email is already in use") from e
        self.db.refresh(user)
        logger.info("Updated user %s", user.id)
        return user

    def delete_user(self, user: UserModel) -> None:
        """Delete a user together with its enrollments and reset tokens.

        Args:
            user: User to delete.
        """
        user_id = user.id
        self.db.query(EnrollmentModel).filter(
            EnrollmentModel.student_id == user_id
        ).delete(synchronize_session=False)
        self.db.query(PasswordResetTokenModel).filter(
            PasswordResetTokenModel.user_id == user_id
        ).delete(synchronize_session=False)
        self.db.delete(user)
        self.db.commit()
        logger.info("Deleted user %s", user_id)

    # --- Authentication ---

    def authenticate(self, email: str, password: str) -> UserModel:
        """Verify credentials.

        Args:
            email: Email address.
            password: Plain text password.

        Returns:
            The authenticated user.

        Raises:
            AuthError: If the email is unknown or the password is wrong.
        """
        user = self.get_user_by_email(email)
        if user is None or not self.verify_password(password, user.password_hash):
            raise AuthError("Invalid credentials")
        return user

    def generate_password_reset_token(self, user: UserModel) -> str:
        """Issue a single-use password reset token for a user.

        Args:
            user: User the token is issued for.

        Returns:
            The token string.
        """
        now = datetime.now(pytz.utc)
        model = PasswordResetTokenModel(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            created_at=now.isoformat(),
            expires_at=(now + timedelta(hours=PASSWORD_RESET_TOKEN_EXPIRE_HOURS)).isoformat(),
        )
        self.db.add(model)
        self.db.commit()
        logger.info("Issued password reset token for user %s", user.id)
        return model.token

    def forgot_password(self, email: str) -> str:
        """Issue a reset token for the account registered under an email.

        The token is returned to the caller directly; no email is sent.

        Raises:
            NotFoundError: If no account uses this email.
        """
        user = self.get_user_by_email(email)
        if user is None:
            raise NotFoundError("No account found with this email.")
        return self.generate_password_reset_token(user)

    def reset_password(self, email: str, token: str, new_password: str) -> UserModel:
        """Overwrite a password using a reset token.

        Args:
            email: Email of the account.
            token: Token previously issued for the account.
            new_password: New plain text password.

        Returns:
            The updated user.

        Raises:
            NotFoundError: If no account uses this email.
            ValidationError: If the token is unknown, issued for another
                account or expired, or the password is too short.
        """
        user = self.get_user_by_email(email)
        if user is None:
            raise NotFoundError("No account found with this email.")

        model = (
            self.db.query(PasswordResetTokenModel)
            .filter(PasswordResetTokenModel.token == token)
            .first()
        )
        if model is None or model.user_id != user.id:
            raise ValidationError("Invalid token.")
        expires_at = datetime.fromisoformat(model.expires_at.replace("Z", "+00:00"))
        if datetime.now(pytz.utc) > expires_at:
            self.db.delete(model)
            self.db.commit()
            raise ValidationError("Reset token has expired.")
        self.check_password_policy(new_password)

        user.password_hash = self.hash_password(new_password)
        self.db.delete(model)
        self.db.commit()
        self.db.refresh(user)
        logger.info("Reset password for user %s", user.id)
        return user
