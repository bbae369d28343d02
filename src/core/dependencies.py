"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes. Each
manager is built per request around the request-scoped DB session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import analysis_manager
from utils import auth_manager
from utils import course_manager
from utils import department_manager
from utils import enrollment_manager
from utils import instructor_manager
from utils import student_manager
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_auth_manager(db: Session = Depends(get_db)) -> auth_manager.AuthManager:
    """Get AuthManager instance with request-scoped DB session."""
    return auth_manager.AuthManager(db)


def get_department_manager(
    db: Session = Depends(get_db),
) -> department_manager.DepartmentManager:
    """Get DepartmentManager instance with request-scoped DB session."""
    return department_manager.DepartmentManager(db)


def get_course_manager(db: Session = Depends(get_db)) -> course_manager.CourseManager:
    """Get CourseManager instance with request-scoped DB session."""
    return course_manager.CourseManager(db)


def get_instructor_manager(
    db: Session = Depends(get_db),
) -> instructor_manager.InstructorManager:
    """Get InstructorManager instance with request-scoped DB session."""
    return instructor_manager.InstructorManager(db)


def get_student_manager(db: Session = Depends(get_db)) -> student_manager.StudentManager:
    """Get StudentManager instance with request-scoped DB session."""
    return student_manager.StudentManager(db)


def get_enrollment_manager(
    db: Session = Depends(get_db),
) -> enrollment_manager.EnrollmentManager:
    """Get EnrollmentManager instance with request-scoped DB session."""
    return enrollment_manager.EnrollmentManager(db)


def get_analysis_manager(
    db: Session = Depends(get_db),
) -> analysis_manager.AnalysisManager:
    return analysis_manager.AnalysisManager(db)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
AuthManagerDep = Annotated[
    auth_manager.AuthManager, Depends(get_auth_manager)
]
DepartmentManagerDep = Annotated[
    department_manager.DepartmentManager, Depends(get_department_manager)
]
CourseManagerDep = Annotated[
    course_manager.CourseManager, Depends(get_course_manager)
]
InstructorManagerDep = Annotated[
    instructor_manager.InstructorManager, Depends(get_instructor_manager)
]
StudentManagerDep = Annotated[
    student_manager.StudentManager, Depends(get_student_manager)
]
EnrollmentManagerDep = Annotated[
    enrollment_manager.EnrollmentManager, Depends(get_enrollment_manager)
]
AnalysisManagerDep = Annotated[
    analysis_manager.AnalysisManager, Depends(get_analysis_manager)
]
