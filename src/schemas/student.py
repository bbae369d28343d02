"""Student schema definitions.

Students are users holding the Student role; these models expose the subset
of user fields managed through the student endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from config import MIN_PASSWORD_LENGTH


class StudentCreateRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone_number: Optional[str] = Field(default=None, max_length=20)
    enrollment_date: datetime
    password: Optional[str] = Field(
        default=None,
        min_length=MIN_PASSWORD_LENGTH,
        description="Required on create; optional on update to change the password.",
    )


class StudentInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    enrollment_date: Optional[datetime] = None
