"""Student management utilities.

Students are users holding the Student role; there is no separate table.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from models.course import CourseInstructorModel
from models.enrollment import EnrollmentModel
from models.user import UserModel
from schemas.user import RoleType
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


class StudentManager:
    """Manages student accounts and student lookups."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)

    def list_students(self) -> List[UserModel]:
        return self.users.list_users_in_role(RoleType.STUDENT)

    def find_student(self, student_id: int) -> Optional[UserModel]:
        user = self.users.get_user_by_id(student_id)
        if user is None or not self.users.has_role(user, RoleType.STUDENT):
            return None
        return user

    def get_student(self, student_id: int) -> UserModel:
        user = self.find_student(student_id)
        if user is None:
            raise NotFoundError.for_entity("Student", student_id)
        return user

    def create_student(
        self,
        first_name: str,
        last_name: str,
        email: str,
        enrollment_date: datetime,
        password: Optional[str],
        phone_number: Optional[str] = None,
    ) -> UserModel:
        """Create a student account.

        Raises:
            ValidationError: If no password is given.
            ConflictError: If the email is already registered.
        """
        if not password or not password.strip():
            raise ValidationError("Password is required for new student.")
        return self.users.create_user(
            email=email,
            password=password,
            role=RoleType.STUDENT,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            enrollment_date=enrollment_date,
        )

    def update_student(
        self,
        student_id: int,
        first_name: str,
        last_name: str,
        email: str,
        enrollment_date: datetime,
        password: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> UserModel:
        """Update a student; a non-blank password replaces the current one."""
        user = self.get_student(student_id)
        user = self.users.update_account(
            user,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            enrollment_date=enrollment_date,
        )
        if password and password.strip():
            self.users.check_password_policy(password)
            user.password_hash = self.users.hash_password(password)
            self.db.commit()
            self.db.refresh(user)
            logger.info("Changed password of student %s", student_id)
        return user

    def delete_student(self, student_id: int) -> None:
        user = self.get_student(student_id)
        self.users.delete_user(user)

    def _students_enrolled_in(self, course_ids: List[int]) -> List[UserModel]:
        if not course_ids:
            return []
        rows = (
            self.db.query(EnrollmentModel.student_id)
            .filter(EnrollmentModel.course_id.in_(course_ids))
            .distinct()
            .all()
        )
        students = []
        for row in rows:
            student = self.find_student(row.student_id)
            if student is not None:
                students.append(student)
        return sorted(students, key=lambda s: s.id)

    def list_by_instructor(self, instructor_id: int) -> List[UserModel]:
        """Students enrolled in any course the instructor teaches."""
        course_ids = [
            row.course_id
            for row in self.db.query(CourseInstructorModel.course_id)
            .filter(CourseInstructorModel.instructor_id == instructor_id)
            .all()
        ]
        return self._students_enrolled_in(course_ids)

    def list_by_course(self, course_id: int) -> List[UserModel]:
        return self._students_enrolled_in([course_id])

    def search(
        self,
        user_id: Optional[int] = None,
        instructor_id: Optional[int] = None,
        course_id: Optional[int] = None,
    ) -> List[UserModel]:
        """Search students; the first given filter wins, none lists everyone."""
        if user_id is not None:
            student = self.find_student(user_id)
            return [student] if student is not None else []
        if instructor_id is not None:
            return self.list_by_instructor(instructor_id)
        if course_id is not None:
            return self.list_by_course(course_id)
        return self.list_students()
