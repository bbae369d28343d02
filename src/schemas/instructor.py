"""Instructor schema definitions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class InstructorCreateRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone_number: Optional[str] = Field(default=None, max_length=20)
    hire_date: datetime
    department_id: Optional[int] = None
    password: Optional[str] = Field(
        default=None,
        description=(
            "Password for the linked user account. Needed only when no user "
            "with this email exists yet; on update, KEEP_CURRENT_PASSWORD or "
            "an empty value leaves the password unchanged."
        ),
    )


class InstructorInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    hire_date: datetime
    department_id: Optional[int] = None
    department_name: Optional[str] = None
