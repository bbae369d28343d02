"""User and authentication schema definitions.

This module defines the request and response models used by the auth,
profile and admin endpoints.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from config import MIN_PASSWORD_LENGTH


class RoleType(str, Enum):
    """Role of a user; drives authorization and id validity checks."""

    STUDENT = "Student"
    INSTRUCTOR = "Instructor"
    ADMIN = "Admin"

    @classmethod
    def from_id(cls, role_id: int) -> "RoleType":
        """Map the numeric role id (1 Student, 2 Instructor, 3 Admin)."""
        return ROLE_IDS[role_id]


ROLE_IDS = {
    1: RoleType.STUDENT,
    2: RoleType.INSTRUCTOR,
    3: RoleType.ADMIN,
}


class UserInfo(BaseModel):
    """User envelope returned with an issued token."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: RoleType = Field(validation_alias="role_type")
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    profile_photo_url: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    company: Optional[str] = None


class CurrentUserResponse(UserInfo):
    """Profile of the authenticated user."""

    name: str
    enrollment_date: Optional[datetime] = None
    roles: List[RoleType] = Field(default_factory=list)


class AdminUserInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: RoleType = Field(validation_alias="role_type")
    enrollment_date: Optional[datetime] = None
    profile_photo_url: Optional[str] = None


class RegisterRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone_number: Optional[str] = Field(default=None, max_length=20)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    role: RoleType
    department_id: Optional[int] = Field(
        default=None,
        description="Required when registering as an instructor.",
    )
    bio: Optional[str] = Field(default=None, max_length=500)
    profile_photo_url: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = Field(default=None, max_length=200)
    company: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    token: str
    expiration: datetime
    user: UserInfo


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=1)


class ForgotPasswordResponse(BaseModel):
    token: str = Field(description="Single-use reset token, handed to the caller directly.")
    email: str


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=1)
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left untouched."""

    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(default=None, max_length=20)
    bio: Optional[str] = Field(default=None, max_length=500)
    profile_photo_url: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = Field(default=None, max_length=200)
    company: Optional[str] = Field(default=None, max_length=100)


class MessageResponse(BaseModel):
    message: str
