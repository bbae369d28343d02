from .base import Base
from .user import UserModel, UserRoleModel
from .password_reset_token import PasswordResetTokenModel
from .department import DepartmentModel
from .course import CourseModel, CourseInstructorModel
from .instructor import InstructorModel
from .enrollment import EnrollmentModel

__all__ = [
    "Base",
    "UserModel",
    "UserRoleModel",
    "PasswordResetTokenModel",
    "DepartmentModel",
    "CourseModel",
    "CourseInstructorModel",
    "InstructorModel",
    "EnrollmentModel",
]
